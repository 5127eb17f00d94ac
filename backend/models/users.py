# backend/models/users.py
import uuid

from sqlalchemy import Column, String, DateTime, func
from sqlalchemy.orm import relationship
from database import Base


def new_id() -> str:
    return str(uuid.uuid4())


# Represents a customer or administrator account
class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True) # Always stored lower-case
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="user") # "user" or "admin"
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    cart_items = relationship("CartItem", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    orders = relationship("Order", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def is_admin(self) -> bool:
        return (self.role or "").lower() == "admin"
