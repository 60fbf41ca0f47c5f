"""Error taxonomy for payroll calculation."""

from __future__ import annotations

from dataclasses import dataclass


class PayrollError(Exception):
    """Base class for errors surfaced by the payroll engine."""


class ValidationError(PayrollError):
    """Raised when calculation input is malformed."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class NotFoundError(PayrollError):
    """Raised when an employee profile cannot be resolved."""

    def __init__(self, employee_id: int):
        self.employee_id = employee_id
        super().__init__(f"Employee not found with ID: {employee_id}")


class RepositoryUnavailableError(PayrollError):
    """Raised by a repository when its backing store cannot be read."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source} unavailable: {message}")


@dataclass(frozen=True)
class PartialDataWarning:
    """A caveat attached to a result computed from incomplete data.

    Never raised. The engine logs it and carries it on the result so
    callers can tell "computed with caveats" from "cannot compute".
    """

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.source}: {self.message}"
