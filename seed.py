# seed.py
# ใช้: python seed.py  (ADMIN_USERNAME / ADMIN_EMAIL / ADMIN_PASSWORD จาก env)
import logging
import os
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

import crud
from database import Base, SessionLocal, engine
from deps.auth import get_password_hash
from logging_setup import configure_logging
from models import (
    Assembly,
    Category,
    Delivery,
    MaintenanceRecord,
    Order,
    Product,
    Subcategory,
)

logger = logging.getLogger("seed")

ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

CATALOG = {
    "Beverages": ["Soda", "Water", "Energy & Sports"],
    "Snacks": ["Chocolate", "Chips"],
}

# (name, category, subcategory, price, description, stock)
PRODUCTS = [
    ("Classic Coca-Cola", "Beverages", "Soda", "2.50", "Refreshing cola drink", 120),
    ("Pepsi", "Beverages", "Soda", "2.50", "Bold cola taste", 95),
    ("Sprite", "Beverages", "Soda", "2.50", "Lemon-lime soda", 80),
    ("Bottled Water", "Beverages", "Water", "1.50", "Pure drinking water", 150),
    ("Snickers Bar", "Snacks", "Chocolate", "1.75", "Chocolate bar with peanuts", 60),
    ("Lay's Classic Chips", "Snacks", "Chips", "2.00", "Classic salted potato chips", 45),
    ("Kit Kat", "Snacks", "Chocolate", "1.75", "Crispy wafer chocolate bar", 70),
    ("Doritos Nacho Cheese", "Snacks", "Chips", "2.25", "Cheesy tortilla chips", 35),
    ("Red Bull Energy Drink", "Beverages", "Energy & Sports", "3.50", "Energy drink", 25),
    ("Gatorade", "Beverages", "Energy & Sports", "2.75", "Sports drink", 40),
]

# (order_number, total, items, status, payment_method, customer)
ORDERS = [
    ("ORD-2025-001", "5.00", 2, "completed", "bank_transfer", "John Smith"),
    ("ORD-2025-002", "3.50", 1, "completed", "cashapp", "Jane Doe"),
    ("ORD-2025-003", "7.25", 3, "completed", "venmo", "Bob Johnson"),
    ("ORD-2025-004", "2.50", 1, "paid", "bank_transfer", "Alice Williams"),
    ("ORD-2025-005", "4.25", 2, "processing", "western_union", "Mike Brown"),
    ("ORD-2025-006", "6.00", 3, "pending", "venmo", "Sarah Davis"),
]


def _dt(s: str) -> datetime:
    return datetime.fromisoformat(s).replace(tzinfo=timezone.utc)


def ensure_admin(db: Session) -> None:
    if crud.get_user_by_username(db, ADMIN_USERNAME):
        logger.info("Admin '%s' already exists", ADMIN_USERNAME)
        return
    crud.create_user(
        db,
        username=ADMIN_USERNAME,
        email=ADMIN_EMAIL,
        password_hash=get_password_hash(ADMIN_PASSWORD),
        role="admin",
    )
    logger.info("Created admin '%s'", ADMIN_USERNAME)


def seed_catalog(db: Session) -> None:
    subs = {}
    for cat_name, sub_names in CATALOG.items():
        cat = Category(name=cat_name)
        db.add(cat)
        db.flush()
        for sub_name in sub_names:
            sub = Subcategory(category_id=cat.id, name=sub_name)
            db.add(sub)
            db.flush()
            subs[sub_name] = sub

    for name, cat_name, sub_name, price, desc, stock in PRODUCTS:
        sub = subs[sub_name]
        db.add(Product(
            name=name,
            category=cat_name,
            category_id=sub.category_id,
            subcategory_id=sub.id,
            price=Decimal(price),
            description=desc,
            stock=stock,
            status="active",
        ))
    logger.info("Added %d categories, %d products", len(CATALOG), len(PRODUCTS))


def seed_operations(db: Session) -> None:
    for number, total, count, status, method, customer in ORDERS:
        db.add(Order(
            order_number=number,
            total_amount=Decimal(total),
            items_count=count,
            status=status,
            payment_method=method,
            customer_info={"name": customer},
        ))

    db.add_all([
        Delivery(
            delivery_number="DLV0001",
            status="delivered",
            delivery_date=_dt("2025-10-05"),
            items=[{"name": "Coca-Cola", "quantity": 24}, {"name": "Snickers", "quantity": 12}],
            notes="Delivered on time",
            driver_name="Tom Wilson",
            tracking_info={"notes": "Received by manager", "delivered_at": "2025-10-05T15:00:00+00:00"},
        ),
        Delivery(
            delivery_number="DLV0002",
            status="in_transit",
            delivery_date=_dt("2025-10-07"),
            items=[{"name": "Pepsi", "quantity": 20}, {"name": "Chips", "quantity": 15}],
            notes="Expected delivery tomorrow",
            driver_name="Emma Clark",
            tracking_info={"location": "En route to Factory Floor A"},
        ),
        Delivery(
            delivery_number="DLV0003",
            status="pending",
            delivery_date=_dt("2025-10-08"),
            items=[{"name": "Water", "quantity": 30}, {"name": "Gatorade", "quantity": 18}],
            notes="Scheduled for Monday",
            driver_name="David Martinez",
        ),
    ])

    db.add_all([
        Assembly(
            name="New Vending Machine Assembly",
            type="full_machine",
            components={"Display Panel": 1, "Payment Module": 1, "Product Dispensers": 12, "Cooling Unit": 1},
            status="in_progress",
            priority="high",
            assigned_to="Tech Team A",
            estimated_time=480,
            notes="For new location opening next week",
        ),
        Assembly(
            name="Replacement Payment System",
            type="component",
            components={"Card Reader": 1, "Bill Acceptor": 1, "Coin Mechanism": 1},
            status="completed",
            priority="urgent",
            assigned_to="Tech Team B",
            estimated_time=120,
        ),
        Assembly(
            name="Maintenance Kit Assembly",
            type="kit",
            components={"Filters": 5, "Belts": 3, "Sensors": 4},
            status="pending",
            priority="normal",
            assigned_to="Tech Team A",
            estimated_time=90,
            notes="Prepare for monthly maintenance",
        ),
    ])

    db.add_all([
        MaintenanceRecord(
            type="routine", priority="normal", status="completed",
            scheduled_date=_dt("2025-09-15"), completed_date=_dt("2025-09-15"),
            technician="John Tech", description="Regular maintenance check",
            notes="All systems normal", cost=Decimal("125.00"),
        ),
        MaintenanceRecord(
            type="repair", priority="high", status="in_progress",
            scheduled_date=_dt("2025-10-06"),
            technician="Sarah Mechanic", description="Payment system malfunction",
            notes="Replacing card reader module", cost=Decimal("350.00"),
        ),
        MaintenanceRecord(
            type="inspection", priority="normal", status="scheduled",
            scheduled_date=_dt("2025-10-10"),
            technician="Mike Inspector", description="Monthly safety inspection",
            cost=Decimal("75.00"),
        ),
        MaintenanceRecord(
            type="cleaning", priority="low", status="scheduled",
            scheduled_date=_dt("2025-10-12"),
            technician="Cleaning Crew", description="Deep cleaning and sanitization",
            cost=Decimal("100.00"),
        ),
    ])
    logger.info("Added %d orders, 3 deliveries, 3 assemblies, 4 maintenance records", len(ORDERS))


def main() -> None:
    configure_logging()
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        ensure_admin(db)
        if db.scalar(select(func.count(Product.id))):
            logger.info("Products already present, skipping sample data")
            return
        seed_catalog(db)
        seed_operations(db)
        db.commit()
        logger.info("Seed completed")
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
