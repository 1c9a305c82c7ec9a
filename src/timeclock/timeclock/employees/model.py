from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee on the timeclock.

    Note: Pure data object (no DB access code).
    """

    employee_id: int
    name: str
    pay_rate: float
