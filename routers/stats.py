# routers/stats.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import crud
from database import get_db
from deps.auth import get_current_user
from deps.authz import require_admin
from schemas import DashboardStats, DeliveredOrderOut
from services.stats import dashboard_stats

router = APIRouter(tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats, dependencies=[Depends(get_current_user)])
def get_stats(db: Session = Depends(get_db)):
    return dashboard_stats(db)


@router.get("/monitoring/delivered", response_model=List[DeliveredOrderOut], dependencies=[Depends(require_admin)])
def delivered_orders(db: Session = Depends(get_db)):
    return [dict(r) for r in crud.delivered_orders_with_customer(db)]
