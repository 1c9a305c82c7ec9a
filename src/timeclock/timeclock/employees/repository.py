from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, employee_id: int, *, for_update: bool = False) -> Optional[Employee]:
        """``for_update`` locks the employee row until the enclosing transaction ends."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, *, name: str, pay_rate: float) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, *, name: str, pay_rate: float) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        """Delete the employee; sessions, requests and allocations cascade."""

        raise NotImplementedError
