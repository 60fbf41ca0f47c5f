"""API endpoint tests over in-memory repositories."""

from datetime import date, time
from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from motorph_payroll.api.app import create_app
from motorph_payroll.api.dependencies import (
    get_app_settings,
    get_db_session,
    get_payroll_engine,
    get_payslip_formatter,
)
from motorph_payroll.calculators.types import AttendancePunch
from motorph_payroll.errors import RepositoryUnavailableError
from motorph_payroll.formatting import PayslipFormatter

pytestmark = pytest.mark.asyncio

PARAMS = {"period_start": "2024-06-01", "period_end": "2024-06-30"}


@pytest.fixture
async def client(engine, settings, session) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with the engine wired to in-memory repositories."""
    app = create_app()
    app.dependency_overrides[get_payroll_engine] = lambda: engine
    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_payslip_formatter] = lambda: PayslipFormatter(settings)

    async def sqlite_session():
        yield session

    app.dependency_overrides[get_db_session] = sqlite_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        """Health endpoint reports the database state."""
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["engine_version"] == "test"
        assert "timestamp" in data

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestCalculateEndpoint:
    """GET /api/v1/payroll/{employee_id}."""

    async def test_calculate(self, client: AsyncClient, attendance):
        attendance.add(AttendancePunch(1, date(2024, 6, 3), time(8, 30), time(16, 30)))

        response = await client.get("/api/v1/payroll/1", params=PARAMS)
        assert response.status_code == 200

        data = response.json()
        assert data["employee_id"] == 1
        assert data["classification"] == "Regular"
        assert data["days_worked"] == 1
        assert data["late_deduction"] == "142.05"
        assert data["partial"] is False
        assert {line["code"] for line in data["lines"]} >= {"BASIC", "LATE", "UNDERTIME"}
        assert all(len(line["line_hash"]) == 32 for line in data["lines"])

    async def test_unknown_employee_is_404(self, client: AsyncClient):
        response = await client.get("/api/v1/payroll/999", params=PARAMS)

        assert response.status_code == 404
        assert response.json() == {
            "detail": "Employee not found with ID: 999",
            "code": "NOT_FOUND",
        }

    async def test_inverted_period_is_422(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/payroll/1",
            params={"period_start": "2024-06-30", "period_end": "2024-06-01"},
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_invalid_employee_id_is_422(self, client: AsyncClient):
        response = await client.get("/api/v1/payroll/0", params=PARAMS)

        assert response.status_code == 422
        assert response.json()["field"] == "employee_id"

    async def test_missing_dates_is_422(self, client: AsyncClient):
        response = await client.get("/api/v1/payroll/1")
        assert response.status_code == 422

    async def test_leave_outage_is_partial(self, client: AsyncClient, leave):
        leave.available = False

        response = await client.get("/api/v1/payroll/1", params=PARAMS)
        assert response.status_code == 200

        data = response.json()
        assert data["partial"] is True
        assert data["warnings"][0]["source"] == "leave"


class TestPayslipEndpoint:
    """GET /api/v1/payroll/{employee_id}/payslip."""

    async def test_profile_resolved_once(self, client: AsyncClient, employees, monkeypatch):
        """The payslip header comes from the calculation's own profile lookup."""
        calls = []
        original_get = employees.get_by_id

        async def counting_get(employee_id):
            calls.append(employee_id)
            return await original_get(employee_id)

        monkeypatch.setattr(employees, "get_by_id", counting_get)

        response = await client.get("/api/v1/payroll/1/payslip", params=PARAMS)

        assert response.status_code == 200
        assert "Juan Dela Cruz" in response.text
        assert calls == [1]

    async def test_plain_text(self, client: AsyncClient):
        response = await client.get("/api/v1/payroll/1/payslip", params=PARAMS)

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "PS-20240630-1" in response.text
        assert "Juan Dela Cruz" in response.text


class TestBatchEndpoints:
    """POST /api/v1/payroll/batch."""

    async def test_batch(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payroll/batch", json={"employee_ids": [1, 2, 999], **PARAMS}
        )
        assert response.status_code == 200

        data = response.json()
        assert {r["employee_id"] for r in data["results"]} == {1, 2}
        assert data["errors"] == {"999": "Employee not found with ID: 999"}
        assert data["error_count"] == 1

    async def test_batch_requires_ids(self, client: AsyncClient):
        response = await client.post("/api/v1/payroll/batch", json={"employee_ids": [], **PARAMS})
        assert response.status_code == 422

    async def test_batch_csv(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/payroll/batch/payslips.csv", json={"employee_ids": [1, 2], **PARAMS}
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        rows = response.text.strip().splitlines()
        assert len(rows) == 3
        assert "Juan Dela Cruz" in rows[1] or "Juan Dela Cruz" in rows[2]


class TestSourceOutage:
    """Employee store failures are 503."""

    async def test_employee_store_unavailable(self, client: AsyncClient, engine):
        class DownEmployees:
            async def get_by_id(self, employee_id):
                raise RepositoryUnavailableError("employee", "connection refused")

        engine.employees = DownEmployees()

        response = await client.get("/api/v1/payroll/1", params=PARAMS)

        assert response.status_code == 503
        assert response.json()["code"] == "SOURCE_UNAVAILABLE"
