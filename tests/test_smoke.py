import pytest

from app.prioritizer import create_app
from app.prioritizer.auth import reset_login_attempts
from app.prioritizer.store import MemoryStore, StoreError


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("ADMIN_USERNAME", "admin")
    monkeypatch.setenv("ADMIN_PASSWORD", "pw")
    monkeypatch.delenv("SEED_DEMO_DATA", raising=False)
    reset_login_attempts()

    app = create_app(store=MemoryStore())
    return app.test_client()


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json["ok"] is True


def test_healthz_ok(client):
    r = client.get("/healthz")
    assert r.status_code == 200
    assert r.data == b"ok"


def test_login_and_api_access(client):
    # Anonymous is rejected with an empty body
    r = client.get("/api/features")
    assert r.status_code == 401
    assert r.data == b""

    # Login
    r = client.post("/api/login", json={"username": "admin", "password": "pw"})
    assert r.status_code == 200
    assert r.json["username"] == "admin"
    assert "password" not in r.json

    # Now the API is accessible
    r = client.get("/api/features")
    assert r.status_code == 200
    assert r.json == []


def test_default_criteria_seeded(client):
    client.post("/api/login", json={"username": "admin", "password": "pw"})
    r = client.get("/api/scoring-criteria")
    assert r.status_code == 200
    assert [c["name"] for c in r.json] == [
        "Revenue Impact",
        "Strategic Alignment",
        "Implementation Effort",
        "Customer Demand",
        "Technical Debt",
    ]
    assert [c["weight"] for c in r.json] == [30, 25, 20, 15, 10]


def test_unknown_route_is_json_404(client):
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert "message" in r.json


class _BrokenStore(MemoryStore):
    def __init__(self, exc):
        super().__init__()
        self._exc = exc

    def list_features(self):
        raise self._exc


@pytest.mark.parametrize(
    "exc, message",
    [
        (StoreError("connection refused at db:5432"), "Storage operation failed"),
        (RuntimeError("secret internals"), "Internal server error"),
    ],
)
def test_store_failures_are_generic_500s(monkeypatch, exc, message):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("ADMIN_USERNAME", "admin")
    monkeypatch.setenv("ADMIN_PASSWORD", "pw")
    reset_login_attempts()

    client = create_app(store=_BrokenStore(exc)).test_client()
    client.post("/api/login", json={"username": "admin", "password": "pw"})
    r = client.get("/api/features")
    assert r.status_code == 500
    assert r.json == {"message": message}
    body = r.get_data(as_text=True)
    assert "Traceback" not in body
    assert str(exc) not in body
