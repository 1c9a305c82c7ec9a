from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import AttendanceSession, SessionClose
from .repository import AttendanceRepository

_COLUMNS = "session_id, employee_id, clock_in_time, clock_out_time, auto_closed"


def _to_session(r: dict) -> AttendanceSession:
    return AttendanceSession(
        session_id=str(r["session_id"]),
        employee_id=int(r["employee_id"]),
        clock_in_time=r["clock_in_time"],
        clock_out_time=r.get("clock_out_time"),
        auto_closed=as_bool(r.get("auto_closed")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, session_id: str) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions WHERE session_id=%s", (session_id,))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def get_open_for_employee(self, employee_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE employee_id=%s AND clock_out_time IS NULL
                ORDER BY clock_in_time DESC
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_open_sessions(self) -> Sequence[AttendanceSession]:
        # FOR UPDATE: a concurrent reconcile run waits for this one to commit.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE clock_out_time IS NULL
                ORDER BY clock_in_time
                FOR UPDATE
                """
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_for_employee(self, employee_id: int, *, limit: Optional[int] = None) -> Sequence[AttendanceSession]:
        sql = f"SELECT {_COLUMNS} FROM attendance_sessions WHERE employee_id=%s ORDER BY clock_in_time DESC"
        params: list[object] = [int(employee_id)]
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_session(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_sessions ORDER BY clock_in_time DESC")
            return [_to_session(r) for r in fetchall(cur)]

    def create_session(self, *, session_id: str, employee_id: int, clock_in_time: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(session_id, employee_id, clock_in_time, auto_closed)
                VALUES(%s,%s,%s,0)
                """,
                (session_id, int(employee_id), clock_in_time),
            )

    def close_sessions_batch(self, updates: Sequence[SessionClose]) -> int:
        if not updates:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                UPDATE attendance_sessions
                SET clock_out_time=%s, auto_closed=%s
                WHERE session_id=%s AND clock_out_time IS NULL
                """,
                [(u.clock_out_time, int(u.auto_closed), u.session_id) for u in updates],
            )
            return int(cur.rowcount)

    def admin_update_times(
        self,
        *,
        session_id: str,
        clock_in_time: datetime,
        clock_out_time: Optional[datetime],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET clock_in_time=%s, clock_out_time=%s
                WHERE session_id=%s
                """,
                (clock_in_time, clock_out_time, session_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, session_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_sessions WHERE session_id=%s", (session_id,))
            return cur.rowcount > 0
