# backend/schemas/order.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import EmailStr, Field

from schemas.common import MAX_LINE_QUANTITY, ORMBase

ShippingType = Literal["instant", "express", "prioritize", "free"]


# Input schema for a single checkout line
class OrderItemInput(ORMBase):
    product_id: str
    quantity: int = Field(default=1, ge=1, le=MAX_LINE_QUANTITY)
    size: Optional[str] = None


# Input schema for checkout. Totals are computed server-side; any
# client-supplied totalAmount/status is ignored.
class OrderCreate(ORMBase):
    customer_name: str = Field(min_length=1)
    customer_email: EmailStr
    customer_phone: str = Field(min_length=10)
    shipping_address: str = Field(min_length=1)
    shipping_city: str = Field(min_length=1)
    shipping_postal_code: str = Field(min_length=5)
    shipping_country: str = Field(min_length=1)
    shipping_type: ShippingType = "express"
    payment_status: Literal["pending", "paid"] = "pending"
    transaction_id: Optional[str] = None
    idempotency_key: Optional[str] = Field(default=None, max_length=255)
    # Omitted means "use the caller's cart"
    items: Optional[List[OrderItemInput]] = None


# Output schema for an individual order line item
class OrderItemOut(ORMBase):
    id: str
    order_id: str
    product_id: Optional[str] = None
    product_name: str
    product_price: int
    quantity: int
    size: Optional[str] = None


# Output schema representing the full order details
class OrderResponse(ORMBase):
    id: str
    user_id: str
    customer_name: str
    customer_email: str
    customer_phone: str
    shipping_address: str
    shipping_city: str
    shipping_postal_code: str
    shipping_country: str
    shipping_type: str
    shipping_cost: int
    subtotal: int
    total_amount: int
    status: str
    is_pre_order: bool
    payment_status: str
    transaction_id: Optional[str] = None
    created_at: datetime
    items: List[OrderItemOut]


# Schema for updating order status
class OrderStatusPatch(ORMBase):
    status: Optional[str] = None
