"""Payroll calculation endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query
from fastapi.responses import PlainTextResponse

from motorph_payroll.api.dependencies import Engine, Formatter
from motorph_payroll.api.schemas import (
    BatchRequest,
    BatchResponse,
    ErrorResponse,
    PayrollResultResponse,
)

router = APIRouter(prefix="/payroll", tags=["payroll"])


@router.get(
    "/{employee_id}",
    response_model=PayrollResultResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def calculate_payroll(
    engine: Engine,
    employee_id: Annotated[int, Path()],
    period_start: Annotated[date, Query()],
    period_end: Annotated[date, Query()],
) -> PayrollResultResponse:
    """Calculate payroll for one employee and period."""
    result = await engine.calculate(employee_id, period_start, period_end)
    return PayrollResultResponse.from_result(result)


@router.get(
    "/{employee_id}/payslip",
    response_class=PlainTextResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def render_payslip(
    engine: Engine,
    formatter: Formatter,
    employee_id: Annotated[int, Path()],
    period_start: Annotated[date, Query()],
    period_end: Annotated[date, Query()],
) -> PlainTextResponse:
    """Calculate payroll and render it as a plain text payslip."""
    result = await engine.calculate(employee_id, period_start, period_end)
    payslip = formatter.build(result)
    return PlainTextResponse(formatter.render_text(payslip))


@router.post(
    "/batch",
    response_model=BatchResponse,
    responses={422: {"model": ErrorResponse}},
)
async def calculate_batch(engine: Engine, payload: BatchRequest) -> BatchResponse:
    """Calculate payroll for several employees over one period."""
    run = await engine.calculate_many(
        payload.employee_ids, payload.period_start, payload.period_end
    )
    return BatchResponse.from_run(run)


@router.post(
    "/batch/payslips.csv",
    response_class=PlainTextResponse,
    responses={422: {"model": ErrorResponse}},
)
async def export_batch_csv(
    engine: Engine, formatter: Formatter, payload: BatchRequest
) -> PlainTextResponse:
    """Calculate a batch and export a payslip summary as CSV."""
    run = await engine.calculate_many(
        payload.employee_ids, payload.period_start, payload.period_end
    )
    payslips = [formatter.build(result) for result in run.results.values()]
    return PlainTextResponse(formatter.to_csv(payslips), media_type="text/csv")
