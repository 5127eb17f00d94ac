# backend/routes/cart.py
import math
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session, joinedload
from database import get_db
from utils.tokenJWT import get_current_user
from utils.audit import client_ip, write_log
from models.users import User
from models.product import Product
from models.cart import CartItem
from schemas.cart import CartAddItem, CartUpdateItem, CartLineOut
from schemas.common import MAX_LINE_QUANTITY

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _cart_lines(db: Session, user_id: str) -> List[CartItem]:
    # Lines whose product has gone away are left out
    items = (
        db.query(CartItem)
        .options(joinedload(CartItem.product))
        .filter(CartItem.user_id == user_id)
        .all()
    )
    return [it for it in items if it.product is not None]


def _user_item(db: Session, user_id: str, item_id: str):
    return db.query(CartItem).filter(CartItem.id == item_id, CartItem.user_id == user_id).first()


@router.get("", response_model=List[CartLineOut])
def get_cart(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return _cart_lines(db, current_user.id)


@router.post("", response_model=List[CartLineOut], status_code=status.HTTP_201_CREATED)
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not payload.product_id:
        raise HTTPException(status_code=400, detail="productId is required")

    product = db.query(Product).filter(Product.id == payload.product_id).first()
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    if payload.size is not None and payload.size not in (product.sizes or []):
        raise HTTPException(status_code=400, detail="Invalid size")
    if payload.quantity < 1:
        raise HTTPException(status_code=400, detail="Quantity must be at least 1")

    # Same product and size share one line
    item = db.query(CartItem).filter(
        CartItem.user_id == current_user.id,
        CartItem.product_id == product.id,
        CartItem.size.is_(None) if payload.size is None else CartItem.size == payload.size,
    ).first()

    if item:
        if item.quantity + payload.quantity > MAX_LINE_QUANTITY:
            raise HTTPException(status_code=400, detail=f"Quantity must be at most {MAX_LINE_QUANTITY}")
        item.quantity += payload.quantity
    else:
        item = CartItem(
            user_id=current_user.id,
            product_id=product.id,
            quantity=payload.quantity,
            size=payload.size,
        )
        db.add(item)
    db.commit()

    write_log(
        db,
        user_id=current_user.id,
        action="CART_ADD",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"product_id": product.id, "size": payload.size, "quantity": payload.quantity},
    )
    return _cart_lines(db, current_user.id)


@router.patch("/{item_id}", response_model=List[CartLineOut])
def update_cart_item(
    item_id: str,
    payload: CartUpdateItem,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    quantity = payload.quantity
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        raise HTTPException(status_code=400, detail="quantity is required")
    if not math.isfinite(quantity) or quantity > MAX_LINE_QUANTITY:
        raise HTTPException(status_code=400, detail=f"Quantity must be at most {MAX_LINE_QUANTITY}")
    quantity = int(quantity)

    item = _user_item(db, current_user.id, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Cart item not found")

    # Zero or less drops the line
    if quantity <= 0:
        db.delete(item)
    else:
        item.quantity = quantity
    db.commit()

    write_log(
        db,
        user_id=current_user.id,
        action="CART_UPDATE",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"item_id": item_id, "quantity": quantity},
    )
    return _cart_lines(db, current_user.id)


@router.delete("/{item_id}", response_model=List[CartLineOut])
def delete_cart_item(
    item_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    item = _user_item(db, current_user.id, item_id)
    if item:
        db.delete(item)
        db.commit()
        write_log(
            db,
            user_id=current_user.id,
            action="CART_DELETE",
            resource="cart",
            status="SUCCESS",
            ip=client_ip(request),
            meta={"item_id": item_id},
        )
    return _cart_lines(db, current_user.id)


@router.delete("", response_model=List[CartLineOut])
def clear_cart(
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    removed = db.query(CartItem).filter(CartItem.user_id == current_user.id).delete(synchronize_session=False)
    db.commit()

    write_log(
        db,
        user_id=current_user.id,
        action="CART_CLEAR",
        resource="cart",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"removed": removed},
    )
    return []
