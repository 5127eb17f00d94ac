# backend/routes/receipt.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session, selectinload

from database import get_db
from models.order import Order
from models.users import User
from schemas.payment import ReceiptRequest
from utils.audit import client_ip, write_log
from utils.pdf import generate_receipt_pdf, receipt_filename
from utils.tokenJWT import get_current_user

router = APIRouter(prefix="/api/receipt", tags=["Receipt"])
logger = logging.getLogger(__name__)


@router.post("/generate")
def generate_receipt(
    payload: ReceiptRequest,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Render the purchase receipt of an order as a downloadable PDF."""
    if not payload.order_id:
        raise HTTPException(status_code=400, detail="orderId is required")

    order = (
        db.query(Order)
        .options(selectinload(Order.items))
        .filter(Order.id == payload.order_id)
        .first()
    )
    if not order or (order.user_id != current_user.id and not current_user.is_admin):
        raise HTTPException(status_code=404, detail="Order not found")

    pdf_bytes = generate_receipt_pdf(order)
    filename = receipt_filename(order)
    logger.info("Generated receipt %s (%d bytes)", filename, len(pdf_bytes))

    write_log(
        db, user_id=current_user.id, action="RECEIPT_PDF", resource="orders", status="SUCCESS",
        ip=client_ip(request), meta={"order_id": order.id},
    )
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
