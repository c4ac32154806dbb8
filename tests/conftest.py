# tests/conftest.py
import os
import tempfile

# ต้องตั้ง env ก่อน import แอป (config.py อ่านตอน import)
_DB_DIR = tempfile.mkdtemp(prefix="vending-tests-")
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_DB_DIR, "test.db")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_TABLES"] = "true"
os.environ["LOG_LEVEL"] = "WARNING"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import crud
from database import Base, SessionLocal, engine
from deps.auth import get_password_hash
from main import app
from models import Product

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def make_user(db, username, role="customer", password=PASSWORD):
    return crud.create_user(
        db,
        username=username,
        email=f"{username}@example.com",
        password_hash=get_password_hash(password),
        role=role,
    )


def login(c, username, password=PASSWORD):
    r = c.post("/api/login", json={"username": username, "password": password})
    assert r.status_code == 200, r.text
    return r


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_client(db):
    make_user(db, "admin", role="admin")
    with TestClient(app) as c:
        login(c, "admin")
        yield c


@pytest.fixture
def customer_client(db):
    make_user(db, "alice")
    with TestClient(app) as c:
        login(c, "alice")
        yield c


@pytest.fixture
def other_customer_client(db):
    make_user(db, "bob")
    with TestClient(app) as c:
        login(c, "bob")
        yield c


@pytest.fixture
def product(db):
    p = Product(name="Classic Coca-Cola", category="Beverages", price=Decimal("2.50"), stock=5, status="active")
    db.add(p)
    db.commit()
    db.refresh(p)
    return p
