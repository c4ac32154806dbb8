# tests/test_operations.py
from datetime import datetime, timedelta, timezone


DELIVERY = {
    "delivery_date": "2025-10-07T10:00:00Z",
    "items": [{"name": "Pepsi", "quantity": 20}, {"name": "Chips", "quantity": 15}],
    "driver_name": "Emma Clark",
}


# ---------- deliveries ----------
def test_delivery_number_is_generated(admin_client):
    first = admin_client.post("/api/deliveries", json=DELIVERY)
    second = admin_client.post("/api/deliveries", json={**DELIVERY, "delivery_number": "AUTO"})
    assert first.status_code == 201, first.text
    assert first.json()["delivery_number"] == "DLV0001"
    assert second.json()["delivery_number"] == "DLV0002"
    assert first.json()["status"] == "pending"


def test_delivery_number_must_be_unique(admin_client):
    body = {**DELIVERY, "delivery_number": "DLV-X"}
    assert admin_client.post("/api/deliveries", json=body).status_code == 201
    assert admin_client.post("/api/deliveries", json=body).status_code == 409


def test_delivery_items_legacy_mapping_is_normalized(admin_client):
    r = admin_client.post("/api/deliveries", json={**DELIVERY, "items": {"Coke": 10, "Chips": 5}})
    assert r.status_code == 201
    assert r.json()["items"] == [{"name": "Coke", "quantity": 10}, {"name": "Chips", "quantity": 5}]


def test_delivery_status_can_skip_and_go_back(admin_client):
    d = admin_client.post("/api/deliveries", json=DELIVERY).json()

    r = admin_client.patch(f"/api/deliveries/{d['id']}/status", json={"status": "delivered"})
    assert r.status_code == 200
    assert r.json()["status"] == "delivered"
    assert r.json()["tracking_info"]["delivered_at"] is not None

    r = admin_client.patch(f"/api/deliveries/{d['id']}/status", json={"status": "pending"})
    assert r.status_code == 200
    assert r.json()["status"] == "pending"


def test_delivery_in_transit_stamps_start(admin_client):
    d = admin_client.post("/api/deliveries", json={**DELIVERY, "tracking_info": {"carrier": "DHL"}}).json()
    r = admin_client.put(f"/api/deliveries/{d['id']}", json={"status": "in_transit"})
    assert r.status_code == 200
    tracking = r.json()["tracking_info"]
    assert tracking["carrier"] == "DHL"
    assert tracking["started_at"] is not None


def test_delivery_status_outside_enum_is_400(admin_client):
    d = admin_client.post("/api/deliveries", json=DELIVERY).json()
    r = admin_client.patch(f"/api/deliveries/{d['id']}/status", json={"status": "lost"})
    assert r.status_code == 400


def test_deliveries_are_admin_only(customer_client, client):
    assert customer_client.get("/api/deliveries").status_code == 403
    assert client.get("/api/deliveries").status_code == 401


def test_delete_delivery(admin_client):
    d = admin_client.post("/api/deliveries", json=DELIVERY).json()
    assert admin_client.delete(f"/api/deliveries/{d['id']}").status_code == 204
    assert admin_client.get(f"/api/deliveries/{d['id']}").status_code == 404


# ---------- assemblies ----------
ASSEMBLY = {
    "name": "Replacement Payment System",
    "type": "component",
    "components": {"Card Reader": 1, "Bill Acceptor": 1},
    "priority": "urgent",
    "estimated_time": 120,
}


def test_assembly_crud(admin_client):
    r = admin_client.post("/api/assemblies", json=ASSEMBLY)
    assert r.status_code == 201, r.text
    a = r.json()
    assert a["status"] == "pending"
    assert a["components"] == {"Card Reader": 1, "Bill Acceptor": 1}

    r = admin_client.put(f"/api/assemblies/{a['id']}", json={"status": "in_progress", "assigned_to": "Tech Team B"})
    assert r.json()["status"] == "in_progress"
    assert r.json()["assigned_to"] == "Tech Team B"

    listed = admin_client.get("/api/assemblies").json()
    assert [x["id"] for x in listed] == [a["id"]]


def test_assembly_rejects_negative_component_quantity(admin_client):
    r = admin_client.post("/api/assemblies", json={**ASSEMBLY, "components": {"Belts": -3}})
    assert r.status_code == 400


def test_assembly_rejects_unknown_type(admin_client):
    r = admin_client.post("/api/assemblies", json={**ASSEMBLY, "type": "spaceship"})
    assert r.status_code == 400


# ---------- maintenance ----------
MAINTENANCE = {
    "type": "repair",
    "priority": "high",
    "scheduled_date": "2025-10-06T08:00:00Z",
    "technician": "Sarah Mechanic",
    "description": "Payment system malfunction",
    "cost": "350.00",
}


def test_maintenance_completion_stamps_date(admin_client):
    m = admin_client.post("/api/maintenance", json=MAINTENANCE).json()
    assert m["status"] == "scheduled"
    assert m["completed_date"] is None
    assert m["cost"] == 350.0

    r = admin_client.put(f"/api/maintenance/{m['id']}", json={"status": "completed"})
    assert r.status_code == 200
    assert r.json()["status"] == "completed"
    assert r.json()["completed_date"] is not None


def test_maintenance_completed_before_scheduled_is_400(admin_client):
    r = admin_client.post(
        "/api/maintenance",
        json={**MAINTENANCE, "status": "completed", "completed_date": "2025-10-01T08:00:00Z"},
    )
    assert r.status_code == 400


def test_maintenance_is_admin_only(customer_client):
    assert customer_client.post("/api/maintenance", json=MAINTENANCE).status_code == 403


def test_delivery_status_on_missing_delivery_is_404(admin_client):
    r = admin_client.patch("/api/deliveries/9999/status", json={"status": "delivered"})
    assert r.status_code == 404
    assert r.json()["detail"] == "Delivery not found"


def _future(days):
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def test_completing_future_maintenance_on_create(admin_client):
    scheduled = _future(5)
    r = admin_client.post("/api/maintenance", json={**MAINTENANCE, "status": "completed", "scheduled_date": scheduled})
    assert r.status_code == 201
    data = r.json()
    assert data["completed_date"] is not None
    assert data["completed_date"] >= data["scheduled_date"]


def test_completing_future_maintenance_on_update(admin_client):
    m = admin_client.post("/api/maintenance", json={**MAINTENANCE, "scheduled_date": _future(5)}).json()
    r = admin_client.put(f"/api/maintenance/{m['id']}", json={"status": "completed"})
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "completed"
    assert data["completed_date"] >= data["scheduled_date"]
