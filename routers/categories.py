# routers/categories.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import crud
from database import get_db
from deps.authz import require_admin
from generic_router import make_crud_router
from models import Category
from schemas import CategoryCreate, CategoryOut, CategoryUpdate, CategoryWithSubcategories

router = make_crud_router(
    Category,
    prefix="categories",
    create_schema=CategoryCreate,
    update_schema=CategoryUpdate,
    out_schema=CategoryOut,
    label="Category",
    list_order_by=Category.name,
    write_dependencies=[Depends(require_admin)],
    unique_fields=["name"],
    on_delete=crud.delete_category,
)

tree_router = APIRouter(tags=["categories"])


@tree_router.get("/categories-with-subcategories", response_model=List[CategoryWithSubcategories])
def categories_with_subcategories(db: Session = Depends(get_db)):
    return crud.categories_with_subcategories(db)
