# backend/routes/orders.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response, status
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from database import get_db
from models.cart import CartItem
from models.order import FINAL_STATUSES, ORDER_STATUSES, Order, OrderItem
from models.product import Product
from models.users import User
from schemas.order import OrderCreate, OrderItemInput, OrderResponse, OrderStatusPatch
from utils.audit import client_ip, write_log
from utils.tokenJWT import get_current_user, require_admin

router = APIRouter(prefix="/api/orders", tags=["Orders"])
logger = logging.getLogger(__name__)

# Shipping prices in minor units (IDR * 100)
SHIPPING_COSTS = {
    "instant": 25_000_000,
    "express": 10_000_000,
    "prioritize": 0,
}
FREE_SHIPPING_THRESHOLD = 1_000_000_000
FREE_SHIPPING_FALLBACK = 10_000_000


def shipping_cost(shipping_type: str, subtotal: int) -> int:
    if shipping_type == "free":
        return 0 if subtotal >= FREE_SHIPPING_THRESHOLD else FREE_SHIPPING_FALLBACK
    return SHIPPING_COSTS.get(shipping_type, SHIPPING_COSTS["express"])


def _order_query(db: Session):
    return db.query(Order).options(selectinload(Order.items))


def _find_by_key(db: Session, key: str) -> Optional[Order]:
    return _order_query(db).filter(Order.idempotency_key == key).first()


def _replay(order: Order, user: User, response: Response) -> Order:
    # A key belongs to whoever placed the first order with it
    if order.user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=409, detail="Idempotency key already used")
    response.status_code = status.HTTP_200_OK
    return order


def _checkout_lines(db: Session, payload: OrderCreate, user: User) -> List[OrderItemInput]:
    if payload.items:
        return payload.items
    cart = db.query(CartItem).filter(CartItem.user_id == user.id).all()
    return [OrderItemInput(product_id=ci.product_id, quantity=ci.quantity, size=ci.size) for ci in cart]


def _reserve_stock(db: Session, product: Product, quantity: int) -> None:
    """Conditionally decrement stock; fails if another order got there first."""
    result = db.execute(
        update(Product)
        .where(Product.id == product.id, Product.stock_quantity >= quantity)
        .values(stock_quantity=Product.stock_quantity - quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise HTTPException(status_code=409, detail=f"Insufficient stock for {product.name}")

    db.execute(
        update(Product)
        .where(Product.id == product.id, Product.stock_quantity <= 0)
        .values(in_stock=False)
        .execution_options(synchronize_session=False)
    )


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    request: Request,
    response: Response,
    idempotency_key_header: Optional[str] = Header(None, alias="Idempotency-Key"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    key = payload.idempotency_key or idempotency_key_header or None
    if key and len(key) > 255:
        raise HTTPException(status_code=400, detail="Invalid order data")

    if key:
        existing = _find_by_key(db, key)
        if existing:
            return _replay(existing, current_user, response)

    lines = _checkout_lines(db, payload, current_user)
    if not lines:
        raise HTTPException(status_code=400, detail="Cart is empty")

    try:
        order_items: List[OrderItem] = []
        subtotal = 0
        any_pre_order = False

        for line in lines:
            product = db.query(Product).filter(Product.id == line.product_id).first()
            if not product:
                raise HTTPException(status_code=404, detail="Product not found")
            if line.size is not None and line.size not in (product.sizes or []):
                raise HTTPException(status_code=400, detail="Invalid size")

            # Pre-order items are made to order and never touch stock
            if product.is_pre_order:
                any_pre_order = True
            else:
                _reserve_stock(db, product, line.quantity)

            subtotal += product.price * line.quantity
            order_items.append(OrderItem(
                product_id=product.id,
                product_name=product.name,
                product_price=product.price,
                quantity=line.quantity,
                size=line.size,
            ))

        shipping = shipping_cost(payload.shipping_type, subtotal)
        order = Order(
            user_id=current_user.id,
            customer_name=payload.customer_name,
            customer_email=payload.customer_email,
            customer_phone=payload.customer_phone,
            shipping_address=payload.shipping_address,
            shipping_city=payload.shipping_city,
            shipping_postal_code=payload.shipping_postal_code,
            shipping_country=payload.shipping_country,
            shipping_type=payload.shipping_type,
            shipping_cost=shipping,
            total_amount=subtotal + shipping,
            status="processing" if payload.payment_status == "paid" else "pending",
            is_pre_order=any_pre_order,
            payment_status=payload.payment_status,
            transaction_id=payload.transaction_id,
            idempotency_key=key,
            items=order_items,
        )
        db.add(order)
        db.query(CartItem).filter(CartItem.user_id == current_user.id).delete(synchronize_session=False)
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        # Lost a race on the same idempotency key; hand back the winner
        winner = _find_by_key(db, key) if key else None
        if winner is None:
            raise
        return _replay(winner, current_user, response)

    db.refresh(order)
    logger.info("Order %s created for user %s (total %s)", order.id, current_user.id, order.total_amount)
    write_log(
        db, user_id=current_user.id, action="ORDER_CREATE", resource="orders", status="SUCCESS",
        ip=client_ip(request),
        meta={"order_id": order.id, "total": order.total_amount, "items": len(order_items)},
    )
    return order


@router.get("", response_model=List[OrderResponse])
def list_orders(
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    query = _order_query(db)
    if status_filter:
        query = query.filter(Order.status == status_filter)
    return query.order_by(Order.created_at.desc()).all()


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    order = _order_query(db).filter(Order.id == order_id).first()
    # Other users' orders are reported as missing
    if not order or (order.user_id != current_user.id and not current_user.is_admin):
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@router.patch("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    payload: OrderStatusPatch,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    new_status = (payload.status or "").strip().lower()
    if new_status not in ORDER_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    order = _order_query(db).filter(Order.id == order_id).first()
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    old_status = order.status
    if old_status in FINAL_STATUSES and new_status != old_status:
        raise HTTPException(status_code=400, detail=f"Cannot change status of a {old_status} order")

    if new_status == "cancelled" and old_status != "cancelled":
        # Give reserved stock back
        for item in order.items:
            product = item.product
            if product is None or product.is_pre_order:
                continue
            product.stock_quantity += item.quantity
            if product.stock_quantity > 0:
                product.in_stock = True

    order.status = new_status
    db.commit()
    db.refresh(order)

    write_log(
        db, user_id=current_user.id, action="ORDER_STATUS", resource="orders", status="SUCCESS",
        ip=client_ip(request), meta={"order_id": order.id, "from": old_status, "to": new_status},
    )
    return order
