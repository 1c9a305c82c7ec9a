from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidDateRange(ValidationError):
    """Raised when a request starts after it ends."""


class NotFound(DomainError):
    """Raised when a referenced request, session or allocation does not exist."""


class EmployeeNotFound(NotFound):
    """Raised when an unknown employee id is referenced."""

    def __init__(self, employee_id):
        super().__init__(f"Employee not found: {employee_id}")
        self.employee_id = employee_id


class QuotaExceeded(DomainError):
    """Raised when a request needs more units than the allocation has left."""

    def __init__(self, *, requested: int, available: int, leave_type: Optional[str] = None):
        label = f"{leave_type} " if leave_type else ""
        super().__init__(f"Not enough {label}days remaining")
        self.requested = requested
        self.available = available
        self.leave_type = leave_type


class AlreadyProcessed(DomainError):
    """Raised when a decided request would move to a different status."""

    def __init__(self, *, request_id: int, current: str, requested: str):
        super().__init__("Cannot modify a request that has already been processed")
        self.request_id = request_id
        self.current = current
        self.requested = requested


class StorageFailure(DomainError):
    """Raised when the store could not commit; the transaction was rolled back."""
