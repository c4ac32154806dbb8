# routers/orders.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

import crud
from database import get_db
from deps.auth import get_current_user
from deps.authz import require_admin
from models import Order, User
from schemas import (
    AssemblyScheduleIn,
    AssemblyStatusIn,
    OrderCreate,
    OrderItemOut,
    OrderOut,
    OrderStatusIn,
    OrderUpdate,
)
from services import order_flow
from utils.code_generator import is_autogen, new_order_number
from utils.orm import payload_to_columns, sa_update_from_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


# ---------------------------
# Helpers
# ---------------------------
def _get_order_or_404(db: Session, order_id: int) -> Order:
    o = db.get(Order, order_id)
    if not o:
        raise HTTPException(404, "Order not found")
    return o


def _get_visible_order(db: Session, order_id: int, user: User) -> Order:
    """ลูกค้าเห็นเฉพาะ order ของตัวเอง (ของคนอื่นตอบ 404)"""
    o = _get_order_or_404(db, order_id)
    if not user.is_admin and o.user_id != user.id:
        raise HTTPException(404, "Order not found")
    return o


def _check_user(db: Session, user_id: Optional[int]) -> None:
    if user_id is not None and not crud.get_user(db, user_id):
        raise HTTPException(400, "User does not exist")


# ---------------------------
# Read
# ---------------------------
@router.get("", response_model=List[OrderOut])
def list_orders(
    limit: Optional[int] = Query(None, ge=1, le=1000),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    owner_id = None if user.is_admin else user.id
    return crud.list_orders(db, owner_id=owner_id, limit=limit)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return _get_visible_order(db, order_id, user)


@router.get("/{order_id}/items", response_model=List[OrderItemOut])
def get_order_items(order_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    o = _get_visible_order(db, order_id, user)
    return crud.list_order_items(db, o.id)


# ---------------------------
# Admin writes
# ---------------------------
@router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_order(payload: OrderCreate, _: User = Depends(require_admin), db: Session = Depends(get_db)):
    data = payload_to_columns(payload)
    _check_user(db, data.get("user_id"))

    if is_autogen(data.get("order_number")):
        data["order_number"] = new_order_number()
    else:
        data["order_number"] = data["order_number"].strip()
        if crud.get_order_number_taken(db, data["order_number"]):
            raise HTTPException(409, "Order number already exists")

    o = Order()
    sa_update_from_dict(o, data)
    db.add(o)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(409, "Order number already exists")
    db.refresh(o)
    logger.info("Order %s created by admin", o.order_number)
    return o


@router.put("/{order_id}", response_model=OrderOut)
def update_order(
    order_id: int,
    payload: OrderUpdate,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    o = _get_order_or_404(db, order_id)
    data = payload_to_columns(payload, exclude_unset=True)
    for k in ("total_amount", "items_count"):
        if k in data and data[k] is None:
            raise HTTPException(400, f"{k} cannot be null")
    if "user_id" in data:
        _check_user(db, data["user_id"])

    sa_update_from_dict(o, data)
    db.commit()
    db.refresh(o)
    return o


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    payload: OrderStatusIn,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    o = _get_order_or_404(db, order_id)
    return order_flow.set_order_status(db, o, payload.status)


# ---------------------------
# Assembly (แยกจาก status ของ order)
# ---------------------------
@router.post("/{order_id}/assembly", response_model=OrderOut)
def schedule_assembly(
    order_id: int,
    payload: AssemblyScheduleIn,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    o = _get_order_or_404(db, order_id)
    return order_flow.schedule_assembly(db, o, payload.assembly_scheduled_date)


@router.patch("/{order_id}/assembly", response_model=OrderOut)
def update_assembly_status(
    order_id: int,
    payload: AssemblyStatusIn,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    o = _get_order_or_404(db, order_id)
    return order_flow.set_assembly_status(db, o, payload.assembly_status)
