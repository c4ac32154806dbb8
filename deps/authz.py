# deps/authz.py
from fastapi import Depends, HTTPException, status

from deps.auth import get_current_user
from models import User


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user
