# services/order_flow.py
"""
Order มี state machine สองตัวบนแถวเดียวกัน แยกกันโดยสิ้นเชิง:

OrderStatus:     pending -> paid -> processing -> completed
                 (ข้ามขั้นไปข้างหน้าได้, failed/cancelled ได้จากทุกสถานะที่ยังไม่จบ)
AssemblyStatus:  (ยังไม่ตั้ง) -> scheduled -> completed
                 (scheduled -> scheduled = เลื่อนวันนัด)
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from models import Order
from schemas import AssemblyStatus, OrderStatus

logger = logging.getLogger(__name__)

ORDER_FLOW = (
    OrderStatus.pending,
    OrderStatus.paid,
    OrderStatus.processing,
    OrderStatus.completed,
)
ORDER_TERMINAL = {OrderStatus.completed, OrderStatus.failed, OrderStatus.cancelled}
ORDER_ABORT = {OrderStatus.failed, OrderStatus.cancelled}

# นับเป็น "ค้างอยู่" บน dashboard
OPEN_ORDER_STATUSES = (OrderStatus.pending, OrderStatus.paid, OrderStatus.processing)


def can_transition_order(current: OrderStatus, target: OrderStatus) -> bool:
    if current == target:
        return True
    if current in ORDER_TERMINAL:
        return False
    if target in ORDER_ABORT:
        return True
    return ORDER_FLOW.index(target) > ORDER_FLOW.index(current)


def can_transition_assembly(current: Optional[AssemblyStatus], target: AssemblyStatus) -> bool:
    if current is None:
        return target == AssemblyStatus.scheduled
    if current == AssemblyStatus.scheduled:
        return True
    return False  # completed แล้วจบ


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _conflict(msg: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=msg)


def set_order_status(db: Session, order: Order, target: OrderStatus) -> Order:
    current = OrderStatus(order.status)
    if not can_transition_order(current, target):
        raise _conflict(f"Cannot change order status from {current.value} to {target.value}")

    if current != target:
        order.status = target.value
        order.updated_at = _utcnow()
        db.commit()
        db.refresh(order)
        logger.info("Order %s status %s -> %s", order.order_number, current.value, target.value)
    return order


def schedule_assembly(db: Session, order: Order, scheduled_date: datetime) -> Order:
    current = AssemblyStatus(order.assembly_status) if order.assembly_status else None
    if not can_transition_assembly(current, AssemblyStatus.scheduled):
        raise _conflict("Assembly already completed for this order")

    order.assembly_scheduled_date = scheduled_date
    order.assembly_status = AssemblyStatus.scheduled.value
    order.updated_at = _utcnow()
    db.commit()
    db.refresh(order)
    logger.info("Order %s assembly scheduled for %s", order.order_number, scheduled_date.isoformat())
    return order


def set_assembly_status(db: Session, order: Order, target: AssemblyStatus) -> Order:
    current = AssemblyStatus(order.assembly_status) if order.assembly_status else None
    if not can_transition_assembly(current, target):
        if current is None:
            raise _conflict("Assembly has not been scheduled for this order")
        raise _conflict(f"Cannot change assembly status from {current.value} to {target.value}")

    order.assembly_status = target.value
    if target == AssemblyStatus.completed:
        order.assembly_completed_date = _utcnow()
    order.updated_at = _utcnow()
    db.commit()
    db.refresh(order)
    logger.info("Order %s assembly -> %s", order.order_number, target.value)
    return order
