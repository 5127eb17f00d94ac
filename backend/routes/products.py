# backend/routes/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from models.product import Product
from models.users import User
import schemas.product as product_schemas
from schemas.common import SuccessResponse
from utils.audit import client_ip, write_log
from utils.search import search_products
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/api", tags=["Products"])


def _get_product_or_404(db: Session, product_id: str) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


# =========================
# CATALOG
# =========================
@router.get("/products", response_model=List[product_schemas.ProductResponse])
def list_products(
    category: Optional[str] = Query(None),
    in_stock: Optional[bool] = Query(None),
    db: Session = Depends(get_db),
):
    query = db.query(Product)
    if category:
        query = query.filter(Product.category == category.lower())
    if in_stock is not None:
        query = query.filter(Product.in_stock == in_stock)
    return query.order_by(Product.created_at.desc(), Product.name).all()


@router.get("/search", response_model=List[product_schemas.ProductResponse])
def search(q: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """Ranked product search; English and Indonesian keywords are both understood."""
    if not q or not q.strip():
        return []
    return search_products(q, db.query(Product).all())


@router.get("/products/{product_id}", response_model=product_schemas.ProductResponse)
def get_product(product_id: str, db: Session = Depends(get_db)):
    return _get_product_or_404(db, product_id)


# =========================
# ADMIN MANAGEMENT
# =========================
@router.post("/products", response_model=product_schemas.ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: product_schemas.ProductCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    data = payload.model_dump()
    data["category"] = data["category"].strip().lower()
    if not data["images"]:
        data["images"] = [data["image_url"]]

    product = Product(**data)
    db.add(product)
    db.commit()
    db.refresh(product)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_CREATE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"id": product.id, "name": product.name}
    )
    return product


@router.patch("/products/{product_id}", response_model=product_schemas.ProductResponse)
def update_product(
    product_id: str,
    payload: product_schemas.ProductUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    product = _get_product_or_404(db, product_id)

    changes = payload.model_dump(exclude_unset=True)
    # Explicit nulls are ignored except for sizes, which may be cleared
    changes = {k: v for k, v in changes.items() if v is not None or k == "sizes"}
    if "category" in changes:
        changes["category"] = changes["category"].strip().lower()

    for key, value in changes.items():
        setattr(product, key, value)

    # Keep availability in line with stock unless the caller set it explicitly
    if "stock_quantity" in changes and "in_stock" not in changes and not product.is_pre_order:
        product.in_stock = product.stock_quantity > 0

    db.commit()
    db.refresh(product)

    write_log(
        db, user_id=current_user.id, action="PRODUCT_UPDATE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"id": product.id, "fields": sorted(changes)}
    )
    return product


@router.delete("/products/{product_id}", response_model=SuccessResponse)
def delete_product(
    product_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    product = _get_product_or_404(db, product_id)
    name = product.name

    # Cart lines cascade; order items keep their snapshot with product_id nulled
    db.delete(product)
    db.commit()

    write_log(
        db, user_id=current_user.id, action="PRODUCT_DELETE", resource="products",
        status="SUCCESS", ip=client_ip(request), meta={"id": product_id, "name": name}
    )
    return {"success": True}
