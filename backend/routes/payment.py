# backend/routes/payment.py
import logging
import random
import time
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.order import Order
from models.users import User
from schemas.payment import PaymentRequest, PaymentResponse
from utils.audit import client_ip, write_log
from utils.tokenJWT import get_optional_user

router = APIRouter(prefix="/api/payment", tags=["Payment"])
logger = logging.getLogger(__name__)

PAYMENT_FAILED = {"success": False, "message": "Payment failed. Please try again."}


def _mark_paid(db: Session, order_id: str, user: Optional[User], transaction_id: str) -> Optional[Order]:
    """Attach the transaction to the order if the caller may see it."""
    if user is None:
        return None
    order = db.query(Order).filter(Order.id == order_id).first()
    if order is None or (order.user_id != user.id and not user.is_admin):
        return None

    order.payment_status = "paid"
    order.transaction_id = transaction_id
    if order.status == "pending":
        order.status = "processing"
    db.commit()
    return order


# Simulated card payment; no money moves. Runs in the threadpool
@router.post("/simulate", response_model=PaymentResponse)
def simulate_payment(
    payload: PaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    if settings.PAYMENT_DELAY_SECONDS > 0:
        time.sleep(settings.PAYMENT_DELAY_SECONDS)

    user_id = current_user.id if current_user else None
    if random.random() >= settings.PAYMENT_SUCCESS_RATE:
        logger.info("Simulated payment declined (order=%s)", payload.order_id)
        write_log(db, user_id=user_id, action="PAYMENT", resource="payment", status="FAIL",
                  ip=client_ip(request), meta={"order_id": payload.order_id, "amount": payload.amount})
        raise HTTPException(status_code=400, detail=PAYMENT_FAILED)

    transaction_id = f"txn_{int(time.time() * 1000)}"
    if payload.order_id:
        order = _mark_paid(db, payload.order_id, current_user, transaction_id)
        if order is None:
            logger.warning("Payment %s not attached; order %s not accessible", transaction_id, payload.order_id)

    write_log(db, user_id=user_id, action="PAYMENT", resource="payment", status="SUCCESS",
              ip=client_ip(request),
              meta={"order_id": payload.order_id, "amount": payload.amount, "transaction_id": transaction_id})
    return {"success": True, "transaction_id": transaction_id, "amount": payload.amount, "status": "paid"}
