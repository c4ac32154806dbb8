# routers/subcategories.py
from typing import List, Optional

from fastapi import Depends, HTTPException, Query
from sqlalchemy.orm import Session

import crud
from database import get_db
from deps.authz import require_admin
from generic_router import make_crud_router
from models import Category, Subcategory
from schemas import SubcategoryCreate, SubcategoryOut, SubcategoryUpdate


def _check_category(db: Session, data: dict) -> None:
    if "category_id" in data and not db.get(Category, data["category_id"]):
        raise HTTPException(400, "Category does not exist")


router = make_crud_router(
    Subcategory,
    prefix="subcategories",
    create_schema=SubcategoryCreate,
    update_schema=SubcategoryUpdate,
    out_schema=SubcategoryOut,
    label="Subcategory",
    write_dependencies=[Depends(require_admin)],
    include_list=False,
    before_create=_check_category,
    before_update=lambda db, obj, data: _check_category(db, data),
    on_delete=crud.delete_subcategory,
)


@router.get("", response_model=List[SubcategoryOut])
def list_subcategories(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    db: Session = Depends(get_db),
):
    return crud.list_subcategories(db, category_id=category_id)
