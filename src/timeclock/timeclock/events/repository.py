from __future__ import annotations

from datetime import datetime
from typing import Protocol


class SystemEventRepository(Protocol):
    def record(self, *, event: str, details: dict, created_at: datetime) -> int:
        raise NotImplementedError
