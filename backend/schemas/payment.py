# backend/schemas/payment.py
from typing import Optional, Union

from schemas.common import ORMBase


class PaymentRequest(ORMBase):
    amount: Optional[Union[int, float]] = None
    order_id: Optional[str] = None


class PaymentResponse(ORMBase):
    success: bool
    transaction_id: str
    amount: Optional[Union[int, float]] = None
    status: str


class ReceiptRequest(ORMBase):
    order_id: Optional[str] = None
