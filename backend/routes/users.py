# backend/routes/users.py
from typing import List

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session, selectinload

from database import get_db
from models.order import Order
from models.users import User
from schemas.common import SuccessResponse
from schemas.order import OrderResponse
from utils.audit import client_ip, write_log
from utils.tokenJWT import clear_session_cookie, get_current_user

router = APIRouter(prefix="/api/user", tags=["User"])


@router.get("/orders", response_model=List[OrderResponse])
def my_orders(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Orders placed by the caller, newest first."""
    return (
        db.query(Order)
        .options(selectinload(Order.items))
        .filter(Order.user_id == current_user.id)
        .order_by(Order.created_at.desc())
        .all()
    )


# Delete the caller's account; sessions, cart and orders go with it
@router.delete("", response_model=SuccessResponse)
def delete_account(
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user_id, email = current_user.id, current_user.email
    db.delete(current_user)
    db.commit()

    clear_session_cookie(response)
    write_log(db, user_id=None, action="ACCOUNT_DELETE", resource="user", status="SUCCESS",
              ip=client_ip(request), meta={"user_id": user_id, "email": email})
    return {"success": True}
