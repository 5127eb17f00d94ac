# backend/seed.py
import hashlib
import math
import logging

from sqlalchemy.orm import Session

from config import settings
from models.product import Product
from models.users import User
from utils.hashing import get_password_hash

logger = logging.getLogger(__name__)

# Price range per category, in rupiah
CATEGORY_RANGE = {
    "rings": (1_500_000, 3_500_000),
    "necklaces": (1_300_000, 2_000_000),
    "bracelets": (750_000, 1_300_000),
    "earrings": (680_000, 1_200_000),
}
DEFAULT_RANGE = (1_000_000, 2_000_000)
PRICE_STEP = 50_000

# Multipliers applied when the material mentions the keyword
MATERIAL_FACTORS = (
    ("diamond", 1.5),
    ("pearl", 1.1),
    ("cubic", 1.05),
    ("zirconia", 1.05),
    ("onyx", 1.05),
    ("glass", 0.85),
    ("stainless", 0.8),
    ("silver", 0.8),
    ("vermeil", 1.1),
    ("18k", 1.2),
    ("14k", 1.15),
    ("gold plated", 1.05),
)

RING_SIZES = ["5", "6", "7", "8", "9"]
BRACELET_SIZES = ["S", "M", "L"]

# name, category, image, material, is_pre_order, sizes, description
CATALOG = [
    ("Rose Gold Diamond Ring", "rings", "/Rose_gold_diamond_ring_406b3b84.png", "14K Rose Gold, Diamond", False, RING_SIZES,
     "Exquisite handcrafted rose gold ring featuring a brilliant-cut diamond. Perfect for engagements or special occasions. Each piece is carefully crafted by skilled artisans."),
    ("Gold Pendant Necklace", "necklaces", "/Gold_pendant_necklace_84aa4494.png", "18K Yellow Gold", False, None,
     "Delicate gold chain necklace with an elegant pendant. A timeless piece that complements any outfit. Crafted from premium materials."),
    ("Silver Charm Bracelet", "bracelets", "/Silver_charm_bracelet_db9c5a93.png", "Sterling Silver", False, BRACELET_SIZES,
     "Elegant sterling silver bracelet with customizable charm options. A perfect gift for loved ones. Each charm tells a unique story."),
    ("Pearl Stud Earrings", "earrings", "/Pearl_stud_earrings_00219806.png", "Freshwater Pearl, Sterling Silver", False, None,
     "Classic pearl earrings set in premium metal. Timeless elegance for everyday wear. Perfect for both casual and formal occasions."),
    ("Rose Gold Stackable Rings Set", "rings", "/Rose_gold_stackable_rings_c4608c25.png", "14K Rose Gold", True, RING_SIZES,
     "Set of three delicate stackable rings in rose gold. Mix and match for a personalized look. Each ring is designed to complement the others beautifully."),
    ("Gold Hoop Earrings", "earrings", "/Gold_hoop_earrings_86358172.png", "18K Yellow Gold", False, None,
     "Modern hoop earrings in polished gold. Versatile and sophisticated for any occasion. A must-have addition to your jewelry collection."),
    ("Silver Infinity Necklace", "necklaces", "/Silver_infinity_necklace_eb3fd355.png", "Sterling Silver", False, None,
     "Symbolic infinity pendant on a delicate silver chain. Represents eternal love and friendship. A meaningful gift for someone special."),
    ("Aurora Twist Bracelet", "bracelets", "/bracelet_new_1.png", "Sterling Silver", False, BRACELET_SIZES,
     "A sleek twisted bracelet with a mirror polish finish. Designed for everyday elegance and comfortable wear."),
    ("Serene Link Bracelet", "bracelets", "/bracelet_new_2.png", "14K Gold Vermeil", False, BRACELET_SIZES,
     "Delicate link bracelet that layers beautifully with other pieces. Hand-assembled for a fluid drape."),
    ("Opaline Bead Bracelet", "bracelets", "/bracelet_new_3.png", "Glass Beads, Stainless Clasp", False, BRACELET_SIZES,
     "Soft opaline beads strung on a durable cord, finished with a refined clasp. A gentle pop of color."),
    ("Linea Cuff Bracelet", "bracelets", "/bracelet_new_4.png", "18K Gold Plated Brass", True, BRACELET_SIZES,
     "Minimalist cuff with a gentle oval profile. Adjustable fit and lightly brushed finish."),
    ("Celeste Chain Bracelet", "bracelets", "/bracelet_new_5.png", "Stainless Steel, PVD Gold", False, BRACELET_SIZES,
     "Fine chain bracelet that catches the light with every move. Lightweight and enduring."),
    ("Noir Bar Bracelet", "bracelets", "/bracelet_new_6.png", "Black Onyx, Stainless Steel", False, BRACELET_SIZES,
     "A modern bar centerpiece on a refined chain. Understated and versatile for daily wear."),
    ("Luna Drop Earrings", "earrings", "/earring_new_1.png", "Sterling Silver", False, None,
     "Graceful drop earrings with a gentle arc silhouette. Polished to a mirror sheen."),
    ("Halo Stud Earrings", "earrings", "/earring_new_2.png", "14K Gold Vermeil", False, None,
     "Round studs framed by a subtle halo for added brilliance. A refined everyday pair."),
    ("Arc Hoop Earrings", "earrings", "/earring_new_3.png", "18K Gold Plated Brass", True, None,
     "Sculpted hoops with a tapered profile. Lightweight for comfortable, all-day wear."),
    ("Solitaire Pendant Necklace", "necklaces", "/necklace_new_1.jpg", "18K Yellow Gold", False, None,
     "Refined solitaire pendant suspended on a fine chain. Effortlessly elegant."),
    ("Cascade Y Necklace", "necklaces", "/necklace_new_2.jpg", "Sterling Silver", False, None,
     "Y-shaped necklace with a delicate vertical drop. Designed to elongate the neckline."),
    ("Nova Lariat Necklace", "necklaces", "/necklace_new_3.jpg", "14K Gold Vermeil", True, None,
     "Minimal lariat necklace featuring a slender bar accent. Perfect for layering."),
    ("Mira Signet Ring", "rings", "/ring_new_1.png", "14K Gold Vermeil", False, RING_SIZES,
     "A modern take on the classic signet ring with a smooth, bold face."),
    ("Astra Solitaire Ring", "rings", "/ring_new_2.png", "14K Rose Gold", False, RING_SIZES,
     "A slender band crowned with a brilliant center stone. Romantic and timeless."),
    ("Vela Stack Ring", "rings", "/ring_new_3.png", "Sterling Silver", False, RING_SIZES,
     "Slim stacking ring designed to pair beautifully with your daily pieces."),
    ("Orbit Duo Ring", "rings", "/ring_new_4.png", "18K Gold Plated Brass", True, RING_SIZES,
     "Two interlocking bands symbolizing balance and unity. A sculptural statement."),
    ("Seraphine Pavé Ring", "rings", "/ring_new_5.png", "18K Yellow Gold, Cubic Zirconia", False, RING_SIZES,
     "Delicate pavé band that adds a touch of sparkle to any stack."),
]


def _rand01(key: str) -> float:
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:8]
    return int(digest, 16) / 0xFFFFFFFF


def compute_price(name: str, category: str, material: str) -> int:
    """Deterministic catalog price in minor units (rupiah * 100)."""
    low, high = CATEGORY_RANGE.get(category, DEFAULT_RANGE)
    base = low + _rand01(f"{name}|{category}|{material}") * (high - low)

    m = material.lower()
    factor = 1.0
    for keyword, multiplier in MATERIAL_FACTORS:
        if keyword in m:
            factor *= multiplier

    priced = min(high, max(low, base * factor))
    priced = math.floor(priced / PRICE_STEP + 0.5) * PRICE_STEP
    return int(priced * 100)


def catalog_products():
    for name, category, image, material, pre_order, sizes, description in CATALOG:
        yield Product(
            name=name,
            description=description,
            price=compute_price(name, category, material),
            category=category,
            image_url=image,
            images=[image],
            material=material,
            is_pre_order=pre_order,
            in_stock=not pre_order,
            stock_quantity=100,
            sizes=list(sizes) if sizes else None,
        )


def seed_products(db: Session) -> int:
    if db.query(Product).first() is not None:
        logger.info("Products already exist; skipping product seed")
        return 0
    products = list(catalog_products())
    db.add_all(products)
    db.commit()
    logger.info("Seeded %d products", len(products))
    return len(products)


def seed_admin(db: Session) -> bool:
    email = settings.ADMIN_EMAIL.strip().lower()
    if db.query(User).filter(User.email == email).first() is not None:
        logger.info("Admin user exists; skipping admin seed")
        return False
    db.add(User(
        name=settings.ADMIN_NAME,
        email=email,
        password_hash=get_password_hash(settings.ADMIN_PASSWORD),
        role="admin",
    ))
    db.commit()
    logger.info("Seeded admin user: %s", email)
    return True


def seed_database(db: Session) -> None:
    seed_products(db)
    seed_admin(db)
