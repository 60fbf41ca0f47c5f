"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from motorph_payroll.calculators import PayrollEngine
from motorph_payroll.config import Settings, get_settings
from motorph_payroll.database import get_session
from motorph_payroll.formatting import PayslipFormatter
from motorph_payroll.repositories import (
    SqlAttendanceRepository,
    SqlEmployeeRepository,
    SqlLeaveRepository,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; commits when the request finishes cleanly."""
    async with get_session() as session:
        yield session


def get_app_settings() -> Settings:
    return get_settings()


async def get_payroll_engine(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> PayrollEngine:
    """Engine wired to SQL repositories sharing one session.

    An AsyncSession cannot serve concurrent tasks, so batch runs go one
    employee at a time.
    """
    return PayrollEngine(
        employees=SqlEmployeeRepository(session),
        attendance=SqlAttendanceRepository(session),
        leave=SqlLeaveRepository(session),
        settings=settings,
        max_concurrency=1,
    )


def get_payslip_formatter(
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> PayslipFormatter:
    return PayslipFormatter(settings)


# Type aliases for cleaner dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db_session)]
Engine = Annotated[PayrollEngine, Depends(get_payroll_engine)]
Formatter = Annotated[PayslipFormatter, Depends(get_payslip_formatter)]
AppSettings = Annotated[Settings, Depends(get_app_settings)]
