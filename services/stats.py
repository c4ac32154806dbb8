# services/stats.py
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models import Order, Product
from services.order_flow import OPEN_ORDER_STATUSES


def dashboard_stats(db: Session) -> dict:
    total_products = db.scalar(select(func.count(Product.id))) or 0
    total_orders, revenue = db.execute(
        select(func.count(Order.id), func.coalesce(func.sum(Order.total_amount), 0))
    ).one()
    pending = db.scalar(
        select(func.count(Order.id)).where(Order.status.in_([s.value for s in OPEN_ORDER_STATUSES]))
    ) or 0

    return {
        "totalProducts": total_products,
        "totalOrders": total_orders or 0,
        "pendingOrders": pending,
        "totalRevenue": float(revenue or 0),
    }
