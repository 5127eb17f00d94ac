# backend/schemas/admin.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field

from schemas.common import ORMBase


class AdminSummary(ORMBase):
    products: int
    orders: int
    revenue: int


class SalesPoint(ORMBase):
    date: str
    total: int


class SalesReport(ORMBase):
    period: str
    from_: str = Field(alias="from")
    to: str
    points: List[SalesPoint]


class LogResponse(ORMBase):
    id: int
    user_id: Optional[str] = None
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    ts: datetime
    meta: Optional[Any] = None


class LogPage(ORMBase):
    items: List[LogResponse]
    total: int
    page: int
    page_size: int
