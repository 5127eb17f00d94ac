# backend/models/log.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from database import Base


# Audit entry for a shopper or admin action (login, cart change, checkout, payment...)
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Kept when the account is deleted, only the link is dropped
    user_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    action = Column(String(50), nullable=False, index=True)    # e.g. LOGIN, ORDER_CREATE
    resource = Column(String(50), nullable=False, index=True)  # auth, cart, orders, ...
    status = Column(String(20), nullable=False, default="SUCCESS", index=True)
    ip = Column(String(64), nullable=True)
    meta = Column(JSON, nullable=True)
