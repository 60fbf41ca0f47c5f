"""Tests for the engine and session lifecycle."""

from decimal import Decimal

import pytest
from sqlalchemy import select, text

from motorph_payroll.api.app import create_app, lifespan
from motorph_payroll.api.dependencies import get_db_session
from motorph_payroll.config import get_settings
from motorph_payroll.database import create_all, dispose_db, get_session, init_db
from motorph_payroll.models import Employee

from tests.conftest import make_settings


@pytest.fixture
async def sqlite_db(tmp_path):
    """Process-wide engine pointed at a temporary SQLite file."""
    settings = make_settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'payroll.db'}")
    init_db(settings)
    await create_all()
    yield
    await dispose_db()


class TestSessionLifecycle:
    """get_session commits on success and rolls back on error."""

    async def test_commit(self, sqlite_db):
        async with get_session() as session:
            session.add(
                Employee(
                    employee_id=1,
                    first_name="Ana",
                    last_name="Reyes",
                    basic_salary=Decimal("30000.00"),
                )
            )

        async with get_session() as session:
            row = (await session.execute(select(Employee))).scalar_one()

        assert row.full_name == "Ana Reyes"
        assert row.status == "Regular"
        assert row.basic_salary == Decimal("30000.00")

    async def test_rollback(self, sqlite_db):
        with pytest.raises(RuntimeError):
            async with get_session() as session:
                session.add(
                    Employee(
                        employee_id=2,
                        first_name="Ben",
                        last_name="Cruz",
                        basic_salary=Decimal("20000.00"),
                    )
                )
                await session.flush()
                raise RuntimeError("abort")

        async with get_session() as session:
            assert await session.get(Employee, 2) is None

    async def test_init_db_reuses_engine(self, sqlite_db):
        first, _ = init_db()
        second, _ = init_db()
        assert first is second

    async def test_request_session_dependency(self, sqlite_db):
        """get_db_session yields a working session from the shared factory."""
        sessions = get_db_session()
        session = await sessions.__anext__()
        assert (await session.execute(text("SELECT 1"))).scalar_one() == 1
        with pytest.raises(StopAsyncIteration):
            await sessions.__anext__()


class TestAppLifespan:
    """Startup and shutdown of the database from the app lifespan."""

    async def test_creates_schema_when_enabled(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'startup.db'}")
        monkeypatch.setenv("CREATE_SCHEMA", "true")
        get_settings.cache_clear()
        try:
            async with lifespan(create_app()):
                async with get_session() as session:
                    assert await session.get(Employee, 1) is None
        finally:
            await dispose_db()
            get_settings.cache_clear()
