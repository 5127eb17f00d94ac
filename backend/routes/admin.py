# backend/routes/admin.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.orm import Session

from database import get_db
from models.log import Log
from models.order import Order
from models.product import Product
from models.users import User
from schemas.admin import AdminSummary, LogPage, SalesReport
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/api/admin", tags=["Admin"])

# Number of days covered by each sales period
SALES_PERIODS = {"week": 7, "month": 30, "quarter": 90}


def _as_utc_date(ts: datetime):
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.date()


# === Dashboard summary ===
@router.get("/summary", response_model=AdminSummary)
def get_summary(db: Session = Depends(get_db), current_user: User = Depends(require_admin)):
    products = db.query(func.count(Product.id)).scalar() or 0
    orders = db.query(func.count(Order.id)).scalar() or 0

    # Cancelled orders never count as revenue
    revenue = (
        db.query(func.coalesce(func.sum(Order.total_amount), 0))
        .filter(Order.status != "cancelled")
        .scalar()
    )
    return {"products": products, "orders": orders, "revenue": int(revenue or 0)}


# === Daily sales chart ===
@router.get("/sales", response_model=SalesReport)
def get_sales(
    period: str = Query("month"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    days = SALES_PERIODS.get(period)
    if days is None:
        raise HTTPException(status_code=400, detail="Invalid period")

    today = datetime.now(timezone.utc).date()
    start = today - timedelta(days=days - 1)

    totals = {start + timedelta(days=i): 0 for i in range(days)}
    rows = (
        db.query(Order.created_at, Order.total_amount)
        .filter(Order.status != "cancelled")
        .all()
    )
    for created_at, amount in rows:
        if created_at is None:
            continue
        day = _as_utc_date(created_at)
        if day in totals:
            totals[day] += amount or 0

    points = [{"date": d.isoformat(), "total": totals[d]} for d in sorted(totals)]
    return {"period": period, "from_": start.isoformat(), "to": today.isoformat(), "points": points}


# === Audit log ===
@router.get("/logs", response_model=LogPage)
def get_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Filter by action"),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
):
    query = db.query(Log)
    if action:
        query = query.filter(Log.action.ilike(f"%{action}%"))

    query = query.order_by(Log.ts.desc(), Log.id.desc())

    total = query.count()
    logs = query.offset((page - 1) * page_size).limit(page_size).all()

    return {
        "items": logs,
        "total": total,
        "page": page,
        "page_size": page_size,
    }
