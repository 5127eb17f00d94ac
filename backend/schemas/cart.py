# backend/schemas/cart.py
from typing import Any, Optional

from pydantic import Field

from schemas.common import MAX_LINE_QUANTITY, ORMBase
from schemas.product import ProductResponse


# Request schema for adding an item to the cart
class CartAddItem(ORMBase):
    product_id: Optional[str] = None
    size: Optional[str] = None
    quantity: int = Field(default=1, le=MAX_LINE_QUANTITY)


# Request schema for updating cart item quantity.
# Left untyped so the route can reject non-numbers with its own message.
class CartUpdateItem(ORMBase):
    quantity: Optional[Any] = None


# Response schema for a single hydrated cart line
class CartLineOut(ORMBase):
    id: str
    quantity: int
    size: Optional[str] = None
    product: ProductResponse
