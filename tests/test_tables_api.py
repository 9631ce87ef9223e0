from __future__ import annotations
import pytest

from app import create_app
from extensions import db
from models import Role, User
from blueprints.tables import services as svc

@pytest.fixture()
def app_ctx():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        for email, role in (("admin@example.com", Role.ADMIN.value), ("guest@example.com", Role.CUSTOMER.value)):
            u = User(email=email, role=role, name=email.split("@")[0])
            u.set_password("pass")
            db.session.add(u)
        svc.initialize_tables(12, 4)
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture()
def client(app_ctx):
    return app_ctx.test_client()

def _login(client, email):
    r = client.post("/api/v1/auth/login", json={"email": email, "password": "pass"})
    assert r.status_code == 200

def test_slots_public(client):
    r = client.get("/api/v1/slots")
    assert r.status_code == 200
    items = r.get_json()["items"]
    assert items[0] == {"slot": 1, "label": "18:00"}
    assert len(items) == 9

def test_availability_requires_login(client):
    assert client.get("/api/v1/tables/available?date=2025-06-01&slot=5").status_code == 401

def test_available_tables(client):
    _login(client, "admin@example.com")
    r = client.post("/api/v1/tables/3/bookings", json={"date": "2025-06-01", "slot": 5})
    assert r.status_code == 200
    assert r.get_json()["item"]["bookings"][0]["booked_slots"] == [5, 6, 7]

    client.post("/api/v1/auth/logout")
    _login(client, "guest@example.com")
    r = client.get("/api/v1/tables/available?date=2025-06-01&slot=5")
    assert r.status_code == 200
    js = r.get_json()
    assert js["occupied_tables"] == [3]
    assert len(js["available_tables"]) == 11

@pytest.mark.parametrize("qs,msg", [
    ("date=2025-06-01", "Date and slot parameters are required"),
    ("slot=5", "Date and slot parameters are required"),
    ("date=bad&slot=5", "Bad date"),
    ("date=2025-06-01&slot=10", "Slot must be between 1 and 9"),
    ("date=2025-06-01&slot=5&capacity=0", "Capacity must be at least 1"),
])
def test_available_tables_bad_params(client, qs, msg):
    _login(client, "guest@example.com")
    r = client.get(f"/api/v1/tables/available?{qs}")
    assert r.status_code == 400
    assert r.get_json()["error"] == msg

def test_daily_availability(client):
    _login(client, "guest@example.com")
    assert client.get("/api/v1/tables/availability").get_json()["error"] == "Date parameter is required"
    r = client.get("/api/v1/tables/availability?date=2025-06-01")
    assert r.status_code == 200
    items = r.get_json()["items"]
    assert len(items) == 12
    assert items[0]["available_slots"] == list(range(1, 10))

def test_admin_endpoints_forbidden_for_customer(client):
    _login(client, "guest@example.com")
    assert client.get("/api/v1/tables").status_code == 403
    assert client.post("/api/v1/tables/initialize").status_code == 403

def test_initialize_and_update(client, app_ctx):
    _login(client, "admin@example.com")
    app_ctx.config["TABLE_COUNT"] = 14
    r = client.post("/api/v1/tables/initialize")
    assert r.get_json()["created"] == 2
    r = client.post("/api/v1/tables/initialize")
    assert r.get_json()["created"] == 0

    r = client.get("/api/v1/tables")
    assert r.get_json()["count"] == 14
    tid = r.get_json()["items"][0]["id"]

    r = client.put(f"/api/v1/tables/{tid}", json={"capacity": 6, "notes": "у окна"})
    assert r.status_code == 200
    assert r.get_json()["item"]["capacity"] == 6

    r = client.put(f"/api/v1/tables/{tid}", json={"capacity": 0})
    assert r.status_code == 400
    assert r.get_json()["error"] == "validation_error"

    assert client.get("/api/v1/tables/9999").status_code == 404

def test_booking_conflict_and_release(client):
    _login(client, "admin@example.com")
    tid = client.get("/api/v1/tables").get_json()["items"][0]["id"]
    assert client.post(f"/api/v1/tables/{tid}/bookings", json={"date": "2025-06-01", "slot": 1}).status_code == 200
    r = client.post(f"/api/v1/tables/{tid}/bookings", json={"date": "2025-06-01", "slot": 2})
    assert r.status_code == 409
    assert r.get_json()["code"] == "already_booked"

    r = client.post(f"/api/v1/tables/{tid}/bookings", json={"date": "2025-06-01", "slot": 8})
    assert r.status_code == 400

    r = client.delete(f"/api/v1/tables/{tid}/bookings", json={"date": "2025-06-01", "slot": 1})
    assert r.status_code == 200
    assert r.get_json()["item"]["bookings"] == []
