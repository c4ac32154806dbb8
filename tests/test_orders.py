# tests/test_orders.py
from decimal import Decimal

import pytest

import crud
from models import Order


def _order(db, number, user=None, status="pending", total="10.00"):
    o = Order(
        order_number=number,
        user_id=user.id if user else None,
        total_amount=Decimal(total),
        items_count=1,
        status=status,
    )
    db.add(o)
    db.commit()
    db.refresh(o)
    return o


@pytest.fixture
def orders(db, customer_client, other_customer_client):
    alice = crud.get_user_by_username(db, "alice")
    bob = crud.get_user_by_username(db, "bob")
    return {
        "alice": [_order(db, "ORD-A1", alice), _order(db, "ORD-A2", alice)],
        "bob": [_order(db, "ORD-B1", bob)],
    }


# ---------- reads ----------
def test_customer_lists_only_own_orders(customer_client, orders):
    r = customer_client.get("/api/orders")
    assert r.status_code == 200
    numbers = {o["order_number"] for o in r.json()}
    assert numbers == {"ORD-A1", "ORD-A2"}


def test_admin_lists_all_orders_with_limit(admin_client, orders):
    r = admin_client.get("/api/orders")
    assert len(r.json()) == 3

    r = admin_client.get("/api/orders", params={"limit": 2})
    assert len(r.json()) == 2
    # ใหม่สุดก่อน
    assert r.json()[0]["order_number"] == "ORD-B1"


def test_customer_cannot_read_other_customers_order(customer_client, orders):
    bob_order = orders["bob"][0]
    assert customer_client.get(f"/api/orders/{bob_order.id}").status_code == 404
    assert customer_client.get(f"/api/orders/{bob_order.id}/items").status_code == 404

    own = orders["alice"][0]
    r = customer_client.get(f"/api/orders/{own.id}")
    assert r.status_code == 200
    assert r.json()["order_number"] == "ORD-A1"


def test_orders_require_login(client):
    assert client.get("/api/orders").status_code == 401


def test_missing_order_is_404(admin_client):
    r = admin_client.get("/api/orders/424242")
    assert r.status_code == 404
    assert r.json()["detail"] == "Order not found"


# ---------- admin writes ----------
def test_admin_creates_order_with_generated_number(admin_client):
    r = admin_client.post("/api/orders", json={"total_amount": "7.25", "items_count": 3, "order_number": "AUTO"})
    assert r.status_code == 201
    data = r.json()
    assert data["order_number"].startswith("ORD-")
    assert data["total_amount"] == 7.25
    assert data["status"] == "pending"


def test_duplicate_order_number_conflicts(admin_client):
    body = {"order_number": "ORD-2025-001", "total_amount": "5.00", "items_count": 2}
    assert admin_client.post("/api/orders", json=body).status_code == 201
    assert admin_client.post("/api/orders", json=body).status_code == 409


def test_customer_cannot_create_order(customer_client):
    r = customer_client.post("/api/orders", json={"total_amount": "1.00", "items_count": 1})
    assert r.status_code == 403


def test_admin_updates_order_fields(admin_client, orders):
    o = orders["alice"][0]
    r = admin_client.put(f"/api/orders/{o.id}", json={"customer_info": {"name": "Alice W."}, "items_count": 4})
    assert r.status_code == 200
    assert r.json()["customer_info"]["name"] == "Alice W."
    assert r.json()["items_count"] == 4
    assert r.json()["status"] == "pending"


# ---------- status ----------
def test_status_outside_allow_list_is_400(admin_client, orders):
    o = orders["alice"][0]
    r = admin_client.patch(f"/api/orders/{o.id}/status", json={"status": "shipped"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Invalid request data"


def test_status_forward_and_terminal(admin_client, orders):
    o = orders["alice"][0]
    for s in ("paid", "processing", "completed"):
        r = admin_client.patch(f"/api/orders/{o.id}/status", json={"status": s})
        assert r.status_code == 200
        assert r.json()["status"] == s

    # completed แล้วย้อนไม่ได้
    r = admin_client.patch(f"/api/orders/{o.id}/status", json={"status": "pending"})
    assert r.status_code == 409


def test_status_cancel_from_open_state(admin_client, orders):
    o = orders["alice"][0]
    r = admin_client.patch(f"/api/orders/{o.id}/status", json={"status": "cancelled"})
    assert r.status_code == 200
    assert r.json()["status"] == "cancelled"


def test_customer_cannot_change_status(customer_client, orders):
    o = orders["alice"][0]
    r = customer_client.patch(f"/api/orders/{o.id}/status", json={"status": "paid"})
    assert r.status_code == 403


def test_customer_forbidden_even_with_bad_status(customer_client, orders):
    o = orders["alice"][0]
    r = customer_client.patch(f"/api/orders/{o.id}/status", json={"status": "shipped"})
    assert r.status_code == 403


# ---------- assembly ----------
def test_assembly_schedule_then_complete(admin_client, orders):
    o = orders["alice"][0]
    r = admin_client.post(f"/api/orders/{o.id}/assembly", json={"assembly_scheduled_date": "2025-11-01T09:00:00Z"})
    assert r.status_code == 200
    data = r.json()
    assert data["assembly_status"] == "scheduled"
    assert data["assembly_scheduled_date"].startswith("2025-11-01")
    # assembly ไม่แตะ status ของ order
    assert data["status"] == "pending"

    r = admin_client.patch(f"/api/orders/{o.id}/assembly", json={"assembly_status": "completed"})
    assert r.status_code == 200
    assert r.json()["assembly_status"] == "completed"
    assert r.json()["assembly_completed_date"] is not None

    # จบแล้วนัดใหม่ไม่ได้
    r = admin_client.post(f"/api/orders/{o.id}/assembly", json={"assembly_scheduled_date": "2025-12-01T09:00:00Z"})
    assert r.status_code == 409


def test_assembly_complete_without_schedule_conflicts(admin_client, orders):
    o = orders["alice"][0]
    r = admin_client.patch(f"/api/orders/{o.id}/assembly", json={"assembly_status": "completed"})
    assert r.status_code == 409


def test_assembly_rejects_unknown_value(admin_client, orders):
    o = orders["alice"][0]
    r = admin_client.patch(f"/api/orders/{o.id}/assembly", json={"assembly_status": "in_progress"})
    assert r.status_code == 400


def test_customer_cannot_touch_assembly(customer_client, orders):
    o = orders["alice"][0]
    r = customer_client.post(f"/api/orders/{o.id}/assembly", json={"assembly_scheduled_date": "2025-11-01T09:00:00Z"})
    assert r.status_code == 403
    r = customer_client.patch(f"/api/orders/{o.id}/assembly", json={"assembly_status": "completed"})
    assert r.status_code == 403


def test_assembly_reschedule_moves_date(admin_client, orders):
    o = orders["alice"][0]
    admin_client.post(f"/api/orders/{o.id}/assembly", json={"assembly_scheduled_date": "2025-11-01T09:00:00Z"})
    r = admin_client.post(f"/api/orders/{o.id}/assembly", json={"assembly_scheduled_date": "2025-11-15T14:30:00Z"})
    assert r.status_code == 200
    assert r.json()["assembly_status"] == "scheduled"
    assert r.json()["assembly_scheduled_date"].startswith("2025-11-15T14:30")

    r = admin_client.patch(f"/api/orders/{o.id}/assembly", json={"assembly_status": "scheduled"})
    assert r.status_code == 200
    assert r.json()["assembly_status"] == "scheduled"


def test_schedule_after_completed_assembly_conflicts(admin_client, orders):
    o = orders["bob"][0]
    admin_client.post(f"/api/orders/{o.id}/assembly", json={"assembly_scheduled_date": "2025-11-01T09:00:00Z"})
    assert admin_client.patch(f"/api/orders/{o.id}/assembly", json={"assembly_status": "completed"}).status_code == 200

    r = admin_client.post(f"/api/orders/{o.id}/assembly", json={"assembly_scheduled_date": "2025-12-01T09:00:00Z"})
    assert r.status_code == 409
    r = admin_client.patch(f"/api/orders/{o.id}/assembly", json={"assembly_status": "scheduled"})
    assert r.status_code == 409


def test_customer_cannot_read_other_customers_order_items(customer_client, other_customer_client, orders):
    alice_order = orders["alice"][0]
    r = other_customer_client.get(f"/api/orders/{alice_order.id}/items")
    assert r.status_code == 404
    assert r.json()["detail"] == "Order not found"

    r = customer_client.get(f"/api/orders/{alice_order.id}/items")
    assert r.status_code == 200
    assert r.json() == []
