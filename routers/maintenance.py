# routers/maintenance.py
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from deps.authz import require_admin
from generic_router import make_crud_router
from models import MaintenanceRecord
from schemas import MaintenanceCreate, MaintenanceOut, MaintenanceStatus, MaintenanceUpdate


def _naive(dt: datetime) -> datetime:
    # SQLite คืน naive, payload อาจเป็น aware
    return dt.astimezone(timezone.utc).replace(tzinfo=None) if dt.tzinfo else dt


def _complete_dates(data: dict, scheduled: Optional[datetime]) -> None:
    """
    status -> completed โดยไม่ส่ง completed_date: ประทับเวลาปัจจุบัน
    (ปิดงานก่อนวันนัดได้: ใช้ scheduled_date แทน ไม่ให้ completed < scheduled)
    """
    if data.get("status") == MaintenanceStatus.completed.value and not data.get("completed_date"):
        now = datetime.now(timezone.utc)
        data["completed_date"] = scheduled if scheduled and _naive(scheduled) > _naive(now) else now

    completed = data.get("completed_date")
    if completed and scheduled and _naive(completed) < _naive(scheduled):
        raise HTTPException(400, "completed_date must not be before scheduled_date")


def _before_create(db: Session, data: dict) -> None:
    _complete_dates(data, data.get("scheduled_date"))


def _before_update(db: Session, obj: MaintenanceRecord, data: dict) -> None:
    _complete_dates(data, data.get("scheduled_date") or obj.scheduled_date)


router = make_crud_router(
    MaintenanceRecord,
    prefix="maintenance",
    create_schema=MaintenanceCreate,
    update_schema=MaintenanceUpdate,
    out_schema=MaintenanceOut,
    label="Maintenance record",
    list_order_by=(MaintenanceRecord.created_at.desc(), MaintenanceRecord.id.desc()),
    read_dependencies=[Depends(require_admin)],
    write_dependencies=[Depends(require_admin)],
    before_create=_before_create,
    before_update=_before_update,
)
