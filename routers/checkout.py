# routers/checkout.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from deps.auth import get_current_user
from models import User
from schemas import CheckoutIn, OrderOut
from services.checkout import checkout

router = APIRouter(tags=["checkout"])


@router.post("/checkout", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_checkout(payload: CheckoutIn, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return checkout(db, user, payload)
