# routers/products.py
from typing import List, Optional

from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

import crud
from database import get_db
from deps.authz import require_admin
from generic_router import make_crud_router
from models import Category, Product, Subcategory
from schemas import ProductCreate, ProductOut, ProductStatus, ProductUpdate


def _check_refs(db: Session, category_id: Optional[int], subcategory_id: Optional[int]) -> None:
    if category_id is not None and not db.get(Category, category_id):
        raise HTTPException(400, "Category does not exist")
    if subcategory_id is not None:
        sub = db.get(Subcategory, subcategory_id)
        if not sub:
            raise HTTPException(400, "Subcategory does not exist")
        if category_id is not None and sub.category_id != category_id:
            raise HTTPException(400, "Subcategory does not belong to category")


def _before_create(db: Session, data: dict) -> None:
    _check_refs(db, data.get("category_id"), data.get("subcategory_id"))
    crud.apply_stock_status(data)


def _before_update(db: Session, obj: Product, data: dict) -> None:
    _check_refs(
        db,
        data.get("category_id", obj.category_id),
        data.get("subcategory_id", obj.subcategory_id),
    )
    crud.apply_stock_status(data, current_stock=obj.stock, current_status=obj.status)


router = make_crud_router(
    Product,
    prefix="products",
    create_schema=ProductCreate,
    update_schema=ProductUpdate,
    out_schema=ProductOut,
    label="Product",
    write_dependencies=[Depends(require_admin)],
    include_list=False,
    before_create=_before_create,
    before_update=_before_update,
)


@router.get("", response_model=List[ProductOut])
def list_products(
    q: Optional[str] = Query(None, description="Search by name or description (ilike)"),
    category_id: Optional[int] = Query(None),
    subcategory_id: Optional[int] = Query(None),
    status: Optional[ProductStatus] = Query(None),
    db: Session = Depends(get_db),
):
    return crud.list_products(
        db,
        q=q,
        category_id=category_id,
        subcategory_id=subcategory_id,
        status=status.value if status else None,
    )
