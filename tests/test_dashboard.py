# tests/test_dashboard.py
from decimal import Decimal

import crud
from models import Order, Product


def _seed(db):
    alice = crud.get_user_by_username(db, "alice")
    db.add_all([
        Product(name="Pepsi", price=Decimal("2.50"), stock=10, status="active"),
        Product(name="Sprite", price=Decimal("2.50"), stock=0, status="out_of_stock"),
    ])
    for n, status, total in [
        ("ORD-1", "pending", "5.00"),
        ("ORD-2", "paid", "3.50"),
        ("ORD-3", "processing", "1.25"),
        ("ORD-4", "completed", "7.25"),
        ("ORD-5", "cancelled", "2.00"),
    ]:
        db.add(Order(
            order_number=n,
            user_id=alice.id if n == "ORD-4" else None,
            total_amount=Decimal(total),
            items_count=1,
            status=status,
            customer_info={"name": "Alice"},
        ))
    db.commit()


def test_stats(customer_client, db):
    _seed(db)
    r = customer_client.get("/api/stats")
    assert r.status_code == 200
    assert r.json() == {
        "totalProducts": 2,
        "totalOrders": 5,
        "pendingOrders": 3,
        "totalRevenue": 19.0,
    }


def test_stats_empty(customer_client):
    assert customer_client.get("/api/stats").json() == {
        "totalProducts": 0,
        "totalOrders": 0,
        "pendingOrders": 0,
        "totalRevenue": 0.0,
    }


def test_stats_requires_login(client):
    assert client.get("/api/stats").status_code == 401


def test_monitoring_delivered(admin_client, customer_client, db):
    _seed(db)
    r = admin_client.get("/api/monitoring/delivered")
    assert r.status_code == 200
    rows = r.json()
    assert [row["order_number"] for row in rows] == ["ORD-4"]
    assert rows[0]["username"] == "alice"
    assert rows[0]["email"] == "alice@example.com"
    assert rows[0]["total_amount"] == 7.25
    assert rows[0]["customer_info"]["name"] == "Alice"


def test_monitoring_is_admin_only(customer_client):
    assert customer_client.get("/api/monitoring/delivered").status_code == 403


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "OK"
    assert "T" in data["timestamp"]
    assert data["uptime"] >= 0
