"""Pytest fixtures for payroll engine tests."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from motorph_payroll.calculators import PayrollEngine
from motorph_payroll.calculators.types import (
    AttendancePunch,
    EmployeeProfile,
    EmploymentClassification,
)
from motorph_payroll.config import Settings
from motorph_payroll.models import Base
from motorph_payroll.repositories import (
    MemoryAttendanceRepository,
    MemoryEmployeeRepository,
    MemoryLeaveRepository,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

PERIOD_START = date(2024, 6, 1)
PERIOD_END = date(2024, 6, 30)


def make_settings(**overrides) -> Settings:
    """Settings built directly so tests never depend on the environment."""
    values = dict(
        database_url=TEST_DATABASE_URL,
        create_schema=False,
        engine_version="test",
        host="127.0.0.1",
        port=8000,
        debug=False,
        log_level="INFO",
        company_name="MotorPH",
        company_address="123 Main Street, Manila, Philippines",
        standard_start=time(8, 0),
        late_threshold=time(8, 15),
        standard_end=time(17, 0),
        hours_per_day=Decimal("8"),
    )
    values.update(overrides)
    return Settings(**values)


def workdays(employee_id: int, count: int, time_in=time(8, 0), time_out=time(17, 0)):
    """Punches on consecutive June 2024 days with the same times."""
    return [
        AttendancePunch(employee_id, date(2024, 6, day), time_in, time_out)
        for day in range(1, count + 1)
    ]


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def regular_employee() -> EmployeeProfile:
    return EmployeeProfile(
        employee_id=1,
        monthly_salary=Decimal("50000"),
        classification=EmploymentClassification.REGULAR,
        rice_subsidy=Decimal("1500"),
        phone_allowance=Decimal("1000"),
        clothing_allowance=Decimal("500"),
        first_name="Juan",
        last_name="Dela Cruz",
        position="Account Manager",
    )


@pytest.fixture
def probationary_employee() -> EmployeeProfile:
    return EmployeeProfile(
        employee_id=2,
        monthly_salary=Decimal("22000"),
        classification=EmploymentClassification.PROBATIONARY,
        rice_subsidy=Decimal("1500"),
        phone_allowance=Decimal("500"),
        clothing_allowance=Decimal("500"),
        first_name="Maria",
        last_name="Santos",
    )


@pytest.fixture
def contractual_employee() -> EmployeeProfile:
    return EmployeeProfile(
        employee_id=3,
        monthly_salary=Decimal("22000"),
        classification=EmploymentClassification.CONTRACTUAL,
        rice_subsidy=Decimal("1500"),
        phone_allowance=Decimal("500"),
        clothing_allowance=Decimal("500"),
    )


@pytest.fixture
def employees(regular_employee, probationary_employee, contractual_employee):
    return MemoryEmployeeRepository(
        [regular_employee, probationary_employee, contractual_employee]
    )


@pytest.fixture
def attendance() -> MemoryAttendanceRepository:
    return MemoryAttendanceRepository()


@pytest.fixture
def leave() -> MemoryLeaveRepository:
    return MemoryLeaveRepository()


@pytest.fixture
def engine(employees, attendance, leave, settings) -> PayrollEngine:
    return PayrollEngine(employees, attendance, leave, settings=settings)


@pytest.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()
