"""Tests for registration, login, logout and the users list."""
from datetime import timedelta

import pytest

from app.prioritizer import auth, create_app
from app.prioritizer.auth import reset_login_attempts
from app.prioritizer.store import MemoryStore


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def client(monkeypatch, store):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("ADMIN_USERNAME", "admin")
    monkeypatch.setenv("ADMIN_PASSWORD", "pw")
    reset_login_attempts()

    app = create_app(store=store)
    return app.test_client()


def _register(client, **overrides):
    body = {"username": "dana", "password": "secret1", "name": "Dana Lee", "role": "PM"}
    body.update(overrides)
    return client.post("/api/register", json=body)


def test_register_logs_in_and_hashes_password(client, store):
    r = _register(client)
    assert r.status_code == 201
    assert r.json["username"] == "dana"
    assert r.json["role"] == "PM"
    assert "password" not in r.json

    stored = store.get_user_by_username("dana")
    assert stored.password != "secret1"

    r = client.get("/api/user")
    assert r.status_code == 200
    assert r.json["id"] == stored.id


def test_register_default_role(client):
    r = client.post("/api/register", json={"username": "eli", "password": "secret1", "name": "Eli"})
    assert r.status_code == 201
    assert r.json["role"] == "user"


def test_register_duplicate_username(client):
    assert _register(client).status_code == 201
    r = _register(client, name="Someone Else")
    assert r.status_code == 400
    assert r.json["message"] == "Username already exists"


@pytest.mark.parametrize(
    "overrides,fragment",
    [
        ({"username": "ab"}, "username"),
        ({"password": "123"}, "password"),
        ({"name": ""}, "name"),
    ],
)
def test_register_validation(client, overrides, fragment):
    r = _register(client, **overrides)
    assert r.status_code == 400
    assert fragment in r.json["message"]


def test_login_bad_password(client):
    r = client.post("/api/login", json={"username": "admin", "password": "wrong"})
    assert r.status_code == 401
    assert client.get("/api/user").status_code == 401


def test_login_missing_fields(client):
    r = client.post("/api/login", json={"username": "admin"})
    assert r.status_code == 400


def test_login_rate_limited(client):
    for _ in range(5):
        client.post("/api/login", json={"username": "admin", "password": "wrong"})
    r = client.post("/api/login", json={"username": "admin", "password": "pw"})
    assert r.status_code == 429


def test_logout_clears_session(client):
    client.post("/api/login", json={"username": "admin", "password": "pw"})
    assert client.get("/api/user").status_code == 200
    r = client.post("/api/logout")
    assert r.status_code == 200
    assert client.get("/api/user").status_code == 401


def test_users_list_requires_auth_and_hides_passwords(client):
    assert client.get("/api/users").status_code == 401
    _register(client)
    r = client.get("/api/users")
    assert r.status_code == 200
    assert [u["username"] for u in r.json] == ["admin", "dana"]
    assert all("password" not in u for u in r.json)


def test_successful_login_drops_attempt_history(client):
    client.post("/api/login", json={"username": "admin", "password": "wrong"})
    assert auth._login_attempts
    assert client.post("/api/login", json={"username": "admin", "password": "pw"}).status_code == 200
    assert not auth._login_attempts


def test_expired_attempts_drop_ip_key(client, monkeypatch):
    client.post("/api/login", json={"username": "admin", "password": "wrong"})
    (ip,) = auth._login_attempts
    later = auth.utcnow() + timedelta(seconds=301)
    monkeypatch.setattr(auth, "utcnow", lambda: later)
    assert auth._check_rate_limit(ip) is False
    assert ip not in auth._login_attempts
