# backend/models/order.py
from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from database import Base
from models.users import new_id

ORDER_STATUSES = ("pending", "processing", "completed", "cancelled")
FINAL_STATUSES = ("completed", "cancelled")


class Order(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Customer and shipping details captured at checkout
    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    shipping_address = Column(String, nullable=False)
    shipping_city = Column(String, nullable=False)
    shipping_postal_code = Column(String, nullable=False)
    shipping_country = Column(String, nullable=False)
    shipping_type = Column(String, nullable=False, default="express")
    shipping_cost = Column(Integer, nullable=False, default=0)

    total_amount = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default="pending", index=True)
    is_pre_order = Column(Boolean, nullable=False, default=False)

    # Simulated payment details
    payment_status = Column(String, nullable=False, default="pending")
    transaction_id = Column(String, nullable=True)

    idempotency_key = Column(String, unique=True, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)

    user = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def subtotal(self) -> int:
        return sum(it.product_price * it.quantity for it in self.items)


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(String, primary_key=True, default=new_id)
    order_id = Column(String, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    # Nulled when the product is deleted; the name/price snapshot stays
    product_id = Column(String, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    product_name = Column(String, nullable=False)
    product_price = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    size = Column(String, nullable=True)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")
