from models.product import Product
from models.users import User
from seed import CATALOG, CATEGORY_RANGE, PRICE_STEP, compute_price, seed_database


def test_prices_are_deterministic_and_in_range():
    for name, category, _image, material, *_rest in CATALOG:
        price = compute_price(name, category, material)
        assert price == compute_price(name, category, material)

        low, high = CATEGORY_RANGE[category]
        rupiah = price // 100
        assert low <= rupiah <= high
        assert rupiah % PRICE_STEP == 0


def test_catalog_seeded(db_session):
    products = db_session.query(Product).all()
    assert len(products) == len(CATALOG) == 24
    for p in products:
        assert p.in_stock is (not p.is_pre_order)
        assert p.stock_quantity == 100
        assert p.images == [p.image_url]


def test_admin_seeded(db_session):
    admin = db_session.query(User).filter(User.role == "admin").one()
    assert admin.email == "admin@lumiere.test"


def test_seeding_is_idempotent(db_session):
    seed_database(db_session)
    assert db_session.query(Product).count() == 24
    assert db_session.query(User).count() == 1
