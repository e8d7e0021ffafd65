from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from payroll_engine.api import create_app
from payroll_engine.config import Settings

HR = {"X-User-Role": "hr"}
ADMIN = {"X-User-Role": "admin"}
EMPLOYEE = {"X-User-Role": "employee"}


@pytest.fixture
def client():
    with TestClient(create_app(Settings(env="test"))) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "environment": "test"}


def test_calculate_payslip(client):
    response = client.post("/payroll/calculate", json={"basic_pay": 10000}, headers=HR)

    assert response.status_code == 200
    body = response.json()
    assert body["gross_pay"] == "10000.00"
    assert body["tax"] == "1326.00"
    assert body["net_pay"] == "8074.00"
    assert [b["bracket_index"] for b in body["breakdown"]["tax_brackets"]] == [0, 1, 2, 3]
    assert body["breakdown"]["social_security"]["was_capped"] is False


def test_calculate_with_adjustments(client):
    payload = {
        "basic_pay": 2000,
        "adjustments": [{"kind": "deduction", "percentage": 0.1, "is_percentage": True, "applies_before_gross": True}],
    }

    response = client.post("/payroll/calculate", json=payload, headers=ADMIN)

    assert response.status_code == 200
    body = response.json()
    assert body["deductions_before_gross"] == "200.00"
    assert body["net_pay"] == "1680.00"


@pytest.mark.parametrize("headers", [EMPLOYEE, {}, {"X-User-Role": "guest"}])
def test_calculate_requires_create_permission(client, headers):
    response = client.post("/payroll/calculate", json={"basic_pay": 10000}, headers=headers)

    assert response.status_code == 403
    assert response.json()["detail"] == "Not permitted"


def test_calculate_rejects_negative_pay(client):
    response = client.post("/payroll/calculate", json={"basic_pay": -1}, headers=HR)

    assert response.status_code == 422


def test_calculate_rejects_unknown_fields(client):
    response = client.post("/payroll/calculate", json={"basic_pay": 100, "salary": 5}, headers=HR)

    assert response.status_code == 422


def test_overtime_uses_configured_multiplier(client):
    payload = {"regular_hours": 160, "regular_rate": 10, "overtime_hours": 10}

    response = client.post("/payroll/overtime", json=payload, headers=EMPLOYEE)

    assert response.status_code == 200
    assert response.json() == {"amount": "1750.00"}


def test_overtime_with_explicit_multiplier(client):
    payload = {"regular_hours": 0, "regular_rate": 20, "overtime_hours": 4, "overtime_multiplier": 2}

    response = client.post("/payroll/overtime", json=payload, headers=EMPLOYEE)

    assert response.json() == {"amount": "160.00"}


def test_validate_salary(client):
    response = client.post("/payroll/validate-salary", json={"salary": 60, "pay_basis": "hourly"}, headers=HR)

    assert response.status_code == 200
    assert response.json() == {"is_valid": False, "warnings": ["Hourly rate seems too high"]}


def test_validate_salary_requires_employee_access(client):
    response = client.post("/payroll/validate-salary", json={"salary": 5000}, headers=EMPLOYEE)

    assert response.status_code == 403


def test_read_tax_configuration(client):
    response = client.get("/tax-configuration", headers=ADMIN)

    assert response.status_code == 200
    body = response.json()
    assert body["contribution_cap"] == "1149.60"
    assert body["brackets"][0] == {"lower_bound": "0", "upper_bound": "5100", "rate": "0"}
    assert body["brackets"][-1]["upper_bound"] is None


def test_tax_configuration_is_admin_only(client):
    response = client.get("/tax-configuration", headers=HR)

    assert response.status_code == 403


def test_missing_configuration_file_is_a_server_error(tmp_path):
    settings = Settings(tax_config_path=tmp_path / "missing.json")

    with TestClient(create_app(settings)) as client:
        response = client.post("/payroll/calculate", json={"basic_pay": 100}, headers=HR)

    assert response.status_code == 500


def test_money_is_returned_as_exact_decimal_strings(client):
    response = client.post("/payroll/calculate", json={"basic_pay": 30000}, headers=HR)

    body = response.json()
    assert body["social_security"] == "1149.60"
    assert body["breakdown"]["social_security"] == {"amount": "1149.60", "rate_applied": "0.05", "was_capped": True}


def test_unknown_role_is_rejected_and_logged(client):
    with capture_logs() as logs:
        response = client.post("/payroll/calculate", json={"basic_pay": 100}, headers={"X-User-Role": "guest"})

    assert response.status_code == 403
    assert "unknown_role" in [entry["event"] for entry in logs]
