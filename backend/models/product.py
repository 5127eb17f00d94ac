# backend/models/product.py
from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, CheckConstraint, func
from database import Base
from models.users import new_id


# A single catalog item.
# Prices are integer minor units (IDR * 100). Pre-order products are sold
# without consuming stock_quantity.
class Product(Base):
    __tablename__ = "products"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False)
    price = Column(Integer, CheckConstraint("price >= 0"), nullable=False)
    category = Column(String, nullable=False, index=True)

    image_url = Column(String, nullable=False)
    images = Column(JSON, nullable=False, default=list)
    material = Column(String, nullable=False)

    is_pre_order = Column(Boolean, nullable=False, default=False)
    in_stock = Column(Boolean, nullable=False, default=True, index=True)
    stock_quantity = Column(Integer, CheckConstraint("stock_quantity >= 0"), nullable=False, default=100)

    # Optional list of selectable sizes, e.g. ["5", "6", "7"] or ["S", "M", "L"]
    sizes = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
