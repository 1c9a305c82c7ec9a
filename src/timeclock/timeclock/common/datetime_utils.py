from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

from ..core.exceptions import ValidationError

_HHMM = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_cutoff_time(value: str) -> time:
    """Parse a strict 24-hour HH:MM string."""
    m = _HHMM.match((value or "").strip())
    if not m:
        raise ValidationError(f"Invalid time (HH:MM, 24-hour): {value!r}")
    return time(hour=int(m.group(1)), minute=int(m.group(2)))


def business_days_between(start: date, end: date) -> int:
    """Count Mon-Fri days in [start, end], both ends included."""
    if end < start:
        return 0
    days = (end - start).days + 1
    full_weeks, rest = divmod(days, 7)
    count = full_weeks * 5
    for offset in range(rest):
        if (start + timedelta(days=full_weeks * 7 + offset)).weekday() < 5:
            count += 1
    return count


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
