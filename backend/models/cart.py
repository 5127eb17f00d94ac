# backend/models/cart.py
from sqlalchemy import Column, String, Integer, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.users import new_id


# A single line (product + size + quantity) in a user's cart
class CartItem(Base):
    __tablename__ = "cart_items"

    id = Column(String, primary_key=True, default=new_id)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    product_id = Column(String, ForeignKey("products.id", ondelete="CASCADE"), index=True, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    size = Column(String, nullable=True)

    user = relationship("User", back_populates="cart_items")
    product = relationship("Product")
