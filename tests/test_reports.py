"""Tests for the matrix, summary and CSV export."""
import csv
import io

import pytest

from app.prioritizer import create_app
from app.prioritizer.auth import reset_login_attempts
from app.prioritizer.modules.reports.service import impact_bucket
from app.prioritizer.store import MemoryStore


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("ADMIN_USERNAME", "admin")
    monkeypatch.setenv("ADMIN_PASSWORD", "pw")
    reset_login_attempts()

    app = create_app(store=MemoryStore())
    return app.test_client()


def _login(client):
    client.post("/api/login", json={"username": "admin", "password": "pw"})


def _seed(client):
    rows = [
        ("Quick win A", 80, 20, "pending", "internal"),
        ("Quick win B", 60, 10, "approved", "enterprise"),
        ("Big bet", 95, 90, "planning", "enterprise"),
        ("Filler", 20, 20, "backlog", "smb"),
        ("Money pit", 10, 100, "rejected", "all"),
    ]
    for title, impact, effort, status, customer_type in rows:
        client.post(
            "/api/features",
            json={
                "title": title,
                "description": f"{title} description",
                "impactScore": impact,
                "effortScore": effort,
                "status": status,
                "customerType": customer_type,
            },
        )


def test_reports_require_auth(client):
    assert client.get("/api/features/matrix").status_code == 401
    assert client.get("/api/reports/summary").status_code == 401
    assert client.get("/api/reports/features.csv").status_code == 401


def test_matrix_quadrants(client):
    _login(client)
    _seed(client)
    r = client.get("/api/features/matrix")
    assert r.status_code == 200
    by_key = {q["quadrant"]: q for q in r.json}
    assert [q["quadrant"] for q in r.json] == ["quick-wins", "major-projects", "fill-ins", "thankless-tasks"]
    # Quick win A: 56+24=80, Quick win B: 42+27=69 -> best first
    assert [f["title"] for f in by_key["quick-wins"]["features"]] == ["Quick win A", "Quick win B"]
    assert by_key["major-projects"]["count"] == 1
    assert by_key["fill-ins"]["features"][0]["title"] == "Filler"
    assert by_key["thankless-tasks"]["features"][0]["title"] == "Money pit"


def test_matrix_empty(client):
    _login(client)
    r = client.get("/api/features/matrix")
    assert all(q["count"] == 0 and q["features"] == [] for q in r.json)


def test_summary(client):
    _login(client)
    _seed(client)
    s = client.get("/api/reports/summary").json
    assert s["totalFeatures"] == 5
    assert s["highImpactFeatures"] == 2
    assert s["lowEffortFeatures"] == 3
    assert s["impactDistribution"] == {"0-19": 1, "20-39": 1, "40-59": 0, "60-79": 1, "80-100": 2}
    assert s["countsByStatus"]["pending"] == 1
    assert s["countsByStatus"]["completed"] == 0
    assert s["countsByCustomerType"]["enterprise"] == 2
    assert s["countsByQuadrant"] == {"quick-wins": 2, "major-projects": 1, "fill-ins": 1, "thankless-tasks": 1}
    assert s["lastUpdatedAt"].endswith("Z")


def test_summary_empty(client):
    _login(client)
    s = client.get("/api/reports/summary").json
    assert s["totalFeatures"] == 0
    assert s["averageTotalScore"] == 0.0
    assert s["lastUpdatedAt"] is None


def test_impact_bucket_edges():
    assert impact_bucket(0) == "0-19"
    assert impact_bucket(19) == "0-19"
    assert impact_bucket(20) == "20-39"
    assert impact_bucket(99) == "80-100"
    assert impact_bucket(100) == "80-100"


def test_csv_export(client):
    _login(client)
    _seed(client)
    r = client.get("/api/reports/features.csv")
    assert r.status_code == 200
    assert r.mimetype == "text/csv"
    rows = list(csv.reader(io.StringIO(r.data.decode("utf-8"))))
    assert rows[0][:3] == ["ID", "Title", "Status"]
    assert len(rows) == 6
    assert rows[1][1] == "Quick win A"
    assert rows[1][6] == "quick-wins"
