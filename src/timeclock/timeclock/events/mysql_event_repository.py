from __future__ import annotations

import json
from datetime import datetime

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .repository import SystemEventRepository


class MySQLSystemEventRepository(SystemEventRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def record(self, *, event: str, details: dict, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO system_events(event, details, created_at) VALUES(%s,%s,%s)",
                (event, json.dumps(details, default=str), created_at),
            )
            return int(cur.lastrowid)
