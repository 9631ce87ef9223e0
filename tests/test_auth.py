from __future__ import annotations
import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from extensions import db
from models import User

@pytest.fixture()
def client_app():
    app = create_app("testing")
    app.config.update(AUTH_RL_MAX=3, AUTH_RL_WINDOW=60)  # агрессивный лимит для теста
    with app.app_context():
        db.create_all()
        db.session.add_all([
            User(email="admin@example.com", password_hash=generate_password_hash("adminpass"), role="ADMIN", is_active_flag=True),
            User(email="guest@example.com", password_hash=generate_password_hash("guestpass"), role="CUSTOMER", is_active_flag=True),
            User(email="blocked@example.com", password_hash=generate_password_hash("pass"), role="CUSTOMER", is_active_flag=False),
        ])
        db.session.commit()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture()
def client(client_app):
    return client_app.test_client()

def _login(client, email, password):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})

def test_unauthorized_401(client):
    r = client.get("/api/v1/auth/me")
    assert r.status_code == 401
    assert r.get_json()["error"] == "unauthorized"

def test_login_success_and_me(client):
    r = _login(client, "Admin@Example.com ", "adminpass")
    assert r.status_code == 200
    js = r.get_json()
    assert js["ok"] is True and js["user"]["role"] == "ADMIN"

    r2 = client.get("/api/v1/auth/me")
    assert r2.status_code == 200
    assert r2.get_json()["user"]["email"] == "admin@example.com"

def test_missing_credentials(client):
    r = client.post("/api/v1/auth/login", json={"email": "guest@example.com"})
    assert r.status_code == 400
    assert r.get_json()["error"] == "missing_credentials"

def test_wrong_password(client):
    r = _login(client, "guest@example.com", "nope")
    assert r.status_code == 401
    assert r.get_json()["error"] == "invalid_credentials"

def test_inactive_user(client):
    r = _login(client, "blocked@example.com", "pass")
    assert r.status_code == 403
    assert r.get_json()["error"] == "inactive"

def test_rate_limit_login(client):
    for _ in range(3):  # AUTH_RL_MAX
        _login(client, "x@example.com", "wrong")
    r = _login(client, "x@example.com", "wrong")
    assert r.status_code == 429

def test_logout(client):
    assert _login(client, "guest@example.com", "guestpass").status_code == 200
    r = client.post("/api/v1/auth/logout")
    assert r.status_code == 200
    assert client.get("/api/v1/auth/me").status_code == 401
