from fastapi.testclient import TestClient

import app.api.employees as employees_api
from app.core.config import Settings, settings
from app.main import app
from tests.helpers import create_employee


def test_health_ok():
    """Test health check endpoint"""
    client = TestClient(app)
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_root_endpoint():
    """Test root endpoint"""
    client = TestClient(app)
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "HR Records Service"
    assert data["status"] == "ok"
    assert "docs" in data
    assert "health" in data


def test_unknown_route_uses_error_envelope():
    client = TestClient(app)
    r = client.get("/no-such-route")
    assert r.status_code == 404
    assert r.json() == {"success": False, "code": 404, "error": "Not Found"}


def test_validation_error_is_400_with_details():
    client = TestClient(app)
    r = client.post("/employees", json={"last_name": "Doe"})
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["code"] == 400
    assert body["error"].startswith("Validation failed")
    fields = {d["field"] for d in body["details"]}
    assert "first_name" in fields
    assert "email" in fields


def test_unhandled_error_is_500_with_reference(db_session, monkeypatch):
    e = create_employee(db_session)

    def broken(*args, **kwargs):
        raise RuntimeError("aggregate exploded")

    monkeypatch.setattr(employees_api, "build_employee_detail", broken)

    client = TestClient(app, raise_server_exceptions=False)
    r = client.get(f"/employees/{e.id}")
    assert r.status_code == 500
    body = r.json()
    assert body["success"] is False
    assert body["code"] == 500
    assert body["error"].startswith("Internal server error: aggregate exploded (ref ")


def test_unhandled_error_hides_details_in_production(db_session, monkeypatch):
    e = create_employee(db_session)

    def broken(*args, **kwargs):
        raise RuntimeError("INSERT INTO employee_onboarding ... jane@example.com")

    monkeypatch.setattr(employees_api, "build_employee_detail", broken)
    monkeypatch.setattr(settings, "APP_ENV", "production")

    client = TestClient(app, raise_server_exceptions=False)
    r = client.get(f"/employees/{e.id}")
    assert r.status_code == 500
    error = r.json()["error"]
    assert error.startswith("Internal server error (ref ")
    assert "jane@example.com" not in error


def test_app_env_defaults_to_production(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    s = Settings(_env_file=None, DATABASE_URL="sqlite://")
    assert s.APP_ENV == "production"
    assert s.is_production is True
