import logging
from typing import Callable, List, Optional, Sequence, Type

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from utils.orm import payload_to_columns, sa_update_from_dict

logger = logging.getLogger(__name__)


def make_crud_router(
    Model,
    prefix: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    out_schema: Type[BaseModel],
    label: str,
    list_order_by=None,
    read_dependencies: Sequence = (),
    write_dependencies: Sequence = (),
    unique_fields: Optional[List[str]] = None,
    include_list: bool = True,
    before_create: Optional[Callable[[Session, dict], None]] = None,
    before_update: Optional[Callable[[Session, object, dict], None]] = None,
    on_delete: Optional[Callable[[Session, object], None]] = None,
):
    """
    สร้าง CRUD router ให้ Model:
    - GET /{prefix}            : list (include_list=False ถ้าจะเขียน list เอง)
    - GET /{prefix}/{id}       : get one
    - POST /{prefix}           : create
    - PUT /{prefix}/{id}       : update (เฉพาะฟิลด์ที่ส่งมา)
    - DELETE /{prefix}/{id}    : delete
    """
    router = APIRouter(prefix=f"/{prefix}", tags=[prefix])
    read_deps = list(read_dependencies)
    write_deps = list(write_dependencies)
    not_found = f"{label} not found"

    def _get_or_404(db: Session, item_id: int):
        obj = db.get(Model, item_id)
        if not obj:
            raise HTTPException(status_code=404, detail=not_found)
        return obj

    def _check_unique(db: Session, data: dict, current=None):
        for f in unique_fields or []:
            if data.get(f) is None:
                continue
            exists = db.scalars(select(Model).where(getattr(Model, f) == data[f])).first()
            if exists and (current is None or exists.id != current.id):
                raise HTTPException(status_code=409, detail=f"{f} already exists")

    def _reject_nulls(data: dict):
        cols = Model.__table__.columns
        for k, v in data.items():
            if v is None and k in cols and not cols[k].nullable:
                raise HTTPException(status_code=400, detail=f"{k} cannot be null")

    def _commit(db: Session):
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning("Integrity error writing %s", label, exc_info=True)
            raise HTTPException(status_code=409, detail=f"{label} conflicts with existing data")

    if include_list:
        @router.get("", response_model=List[out_schema], dependencies=read_deps)
        def list_items(db: Session = Depends(get_db)):
            stmt = select(Model)
            if list_order_by is not None:
                stmt = stmt.order_by(*list_order_by) if isinstance(list_order_by, (list, tuple)) \
                    else stmt.order_by(list_order_by)
            return db.scalars(stmt).all()

    @router.get("/{item_id}", response_model=out_schema, dependencies=read_deps)
    def get_item(item_id: int, db: Session = Depends(get_db)):
        return _get_or_404(db, item_id)

    @router.post("", response_model=out_schema, status_code=status.HTTP_201_CREATED, dependencies=write_deps)
    def create_item(payload: create_schema, db: Session = Depends(get_db)):  # type: ignore[valid-type]
        data = payload_to_columns(payload)
        if before_create:
            before_create(db, data)
        _check_unique(db, data)

        obj = Model()
        sa_update_from_dict(obj, data)
        db.add(obj)
        _commit(db)
        db.refresh(obj)
        logger.info("Created %s id=%s", label, obj.id)
        return obj

    @router.put("/{item_id}", response_model=out_schema, dependencies=write_deps)
    def update_item(item_id: int, payload: update_schema, db: Session = Depends(get_db)):  # type: ignore[valid-type]
        obj = _get_or_404(db, item_id)
        data = payload_to_columns(payload, exclude_unset=True)
        _reject_nulls(data)
        if before_update:
            before_update(db, obj, data)
        _check_unique(db, data, current=obj)

        sa_update_from_dict(obj, data)
        _commit(db)
        db.refresh(obj)
        return obj

    @router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=write_deps)
    def delete_item(item_id: int, db: Session = Depends(get_db)):
        obj = _get_or_404(db, item_id)
        if on_delete:
            on_delete(db, obj)
        else:
            db.delete(obj)
            db.commit()
        logger.info("Deleted %s id=%s", label, item_id)
        return None

    return router
