# database.py
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from config import DATABASE_URL, DB_POOL_SIZE


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # SQLite (dev/tests): TestClient เรียก handler จาก thread อื่น
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_size": DB_POOL_SIZE}


engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    future=True,
    **_engine_kwargs(DATABASE_URL),
)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """session ละหนึ่ง request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
