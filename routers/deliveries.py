# routers/deliveries.py
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from deps.authz import require_admin
from generic_router import make_crud_router
from models import Delivery
from schemas import DeliveryCreate, DeliveryOut, DeliveryStatus, DeliveryStatusIn, DeliveryUpdate
from utils.code_generator import is_autogen, next_code

# สถานะ -> ช่องเวลาใน tracking_info ที่ต้องประทับ
_TRACKING_STAMPS = {
    DeliveryStatus.in_transit.value: "started_at",
    DeliveryStatus.delivered.value: "delivered_at",
}


def stamp_tracking(tracking: Optional[dict], new_status: Optional[str]) -> Optional[dict]:
    key = _TRACKING_STAMPS.get(new_status or "")
    if key is None:
        return tracking
    tracking = dict(tracking or {})
    if not tracking.get(key):
        tracking[key] = datetime.now(timezone.utc).isoformat()
    return tracking


def _before_create(db: Session, data: dict) -> None:
    if is_autogen(data.get("delivery_number")):
        data["delivery_number"] = next_code(db, Delivery, "delivery_number", prefix="DLV", width=4)
    else:
        data["delivery_number"] = data["delivery_number"].strip()
    data["tracking_info"] = stamp_tracking(data.get("tracking_info"), data.get("status"))


def _before_update(db: Session, obj: Delivery, data: dict) -> None:
    if "delivery_number" in data and is_autogen(data["delivery_number"]):
        data.pop("delivery_number")
    if "status" in data and data["status"] != obj.status:
        base = data["tracking_info"] if "tracking_info" in data else obj.tracking_info
        data["tracking_info"] = stamp_tracking(base, data["status"])


router = make_crud_router(
    Delivery,
    prefix="deliveries",
    create_schema=DeliveryCreate,
    update_schema=DeliveryUpdate,
    out_schema=DeliveryOut,
    label="Delivery",
    list_order_by=(Delivery.created_at.desc(), Delivery.id.desc()),
    read_dependencies=[Depends(require_admin)],
    write_dependencies=[Depends(require_admin)],
    unique_fields=["delivery_number"],
    before_create=_before_create,
    before_update=_before_update,
)


@router.patch("/{item_id}/status", response_model=DeliveryOut, dependencies=[Depends(require_admin)])
def update_delivery_status(item_id: int, payload: DeliveryStatusIn, db: Session = Depends(get_db)):
    d = db.get(Delivery, item_id)
    if not d:
        raise HTTPException(404, "Delivery not found")
    # ไม่มี guard ลำดับสถานะ: ข้ามหรือย้อนกลับได้
    if payload.status.value != d.status:
        d.tracking_info = stamp_tracking(d.tracking_info, payload.status.value)
        d.status = payload.status.value
        db.commit()
        db.refresh(d)
    return d
