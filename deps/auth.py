# deps/auth.py
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response, status
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

import crud
from config import (
    ALGORITHM,
    BCRYPT_ROUNDS,
    RESET_TOKEN_EXPIRE_MINUTES,
    SECRET_KEY,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    SESSION_MAX_AGE_DAYS,
)
from database import get_db
from models import User, UserSession

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

RESET_PURPOSE = "password_reset"


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def get_password_hash(plain: str) -> str:
    return pwd_context.hash(plain)


def authenticate_user(db: Session, login: str, password: str) -> Optional[User]:
    user = crud.get_user_by_login(db, login)
    if not user or not verify_password(password, user.password_hash):
        return None
    return user


# ======= Sessions (เก็บใน DB, cookie เป็น sid สุ่ม) =======
def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_aware(dt: datetime) -> datetime:
    # SQLite คืนค่า naive datetime
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def create_session(db: Session, user: User) -> UserSession:
    sess = UserSession(
        sid=secrets.token_urlsafe(32),
        user_id=user.id,
        expires_at=_utcnow() + timedelta(days=SESSION_MAX_AGE_DAYS),
    )
    db.add(sess)
    db.commit()
    return sess


def destroy_session(db: Session, sid: str) -> None:
    db.execute(delete(UserSession).where(UserSession.sid == sid))
    db.commit()


def purge_expired_sessions(db: Session) -> int:
    res = db.execute(delete(UserSession).where(UserSession.expires_at < _utcnow()))
    db.commit()
    n = res.rowcount or 0
    if n:
        logger.info("Purged %d expired sessions", n)
    return n


def set_session_cookie(response: Response, sess: UserSession) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=sess.sid,
        max_age=SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        httponly=True,
        samesite="lax",
        secure=SESSION_COOKIE_SECURE,
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=SESSION_COOKIE_NAME)


def login_user(db: Session, response: Response, user: User) -> UserSession:
    sess = create_session(db, user)
    set_session_cookie(response, sess)
    return sess


# ======= Request context =======
def get_current_user_optional(request: Request, db: Session = Depends(get_db)) -> Optional[User]:
    """cookie -> User หรือ None (ไม่ raise)"""
    sid = request.cookies.get(SESSION_COOKIE_NAME)
    if not sid:
        return None
    sess = db.scalars(select(UserSession).where(UserSession.sid == sid)).first()
    if sess is None:
        return None
    if _as_aware(sess.expires_at) <= _utcnow():
        destroy_session(db, sid)
        return None
    return sess.user


def get_current_user(user: Optional[User] = Depends(get_current_user_optional)) -> User:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return user


# ======= Password reset token (JWT) =======
def create_reset_token(user: User, minutes: int = RESET_TOKEN_EXPIRE_MINUTES) -> str:
    to_encode = {
        "sub": str(user.id),
        "purpose": RESET_PURPOSE,
        # hash เดิมเป็นส่วนหนึ่งของ token: เปลี่ยนรหัสแล้ว token เก่าใช้ไม่ได้
        "pwh": user.password_hash[-16:],
        "exp": _utcnow() + timedelta(minutes=minutes),
    }
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def user_from_reset_token(db: Session, token: str) -> User:
    bad = HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired reset token")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        if payload.get("purpose") != RESET_PURPOSE:
            raise bad
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        raise bad

    user = crud.get_user(db, user_id)
    if not user or user.password_hash[-16:] != payload.get("pwh"):
        raise bad
    return user
