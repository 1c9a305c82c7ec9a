"""Automatic clock-out of sessions left open at the end of the day.

The reconciler holds no scheduling state: a trigger (the daily scheduler,
cron, or a manual API call) passes the current instant and the policy.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import parse_cutoff_time
from ..core.constants import AUTO_CLOCK_OUT_EVENT, DEFAULT_CUTOFF_TIME, LATE_CLOCK_IN_OFFSET_MINUTES
from ..core.transaction import TransactionManager
from ..events.repository import SystemEventRepository
from .model import AttendanceSession, SessionClose
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutoClockOutPolicy:
    enabled: bool = True
    default_cutoff: time = time(17, 30)
    log_events: bool = True

    @classmethod
    def from_settings(cls, settings: Mapping) -> "AutoClockOutPolicy":
        """Build from the AUTO_CLOCK_OUT settings dict; validates the HH:MM time."""
        return cls(
            enabled=bool(settings.get("enabled", True)),
            default_cutoff=parse_cutoff_time(settings.get("default_time") or DEFAULT_CUTOFF_TIME),
            log_events=bool(settings.get("log_events", True)),
        )

    def with_cutoff(self, value: str) -> "AutoClockOutPolicy":
        return AutoClockOutPolicy(
            enabled=self.enabled,
            default_cutoff=parse_cutoff_time(value),
            log_events=self.log_events,
        )


@dataclass(frozen=True)
class ReconcileResult:
    closed_count: int
    closed_sessions: Sequence[AttendanceSession] = field(default_factory=tuple)
    chosen_cutoff: Optional[datetime] = None
    used_default_time: bool = False
    enabled: bool = True


def choose_cutoff(now: datetime, cutoff: time) -> datetime:
    """Today's policy cutoff, or ``now`` when the job runs before it."""
    cutoff_instant = datetime.combine(now.date(), cutoff)
    return cutoff_instant if now > cutoff_instant else now


def clock_out_time_for(session: AttendanceSession, chosen_cutoff: datetime) -> datetime:
    if session.clock_in_time > chosen_cutoff:
        return session.clock_in_time + timedelta(minutes=LATE_CLOCK_IN_OFFSET_MINUTES)
    return chosen_cutoff


class AttendanceReconciler:
    def __init__(
        self,
        attendance: AttendanceRepository,
        tx: TransactionManager,
        *,
        events: Optional[SystemEventRepository] = None,
    ):
        self._attendance = attendance
        self._tx = tx
        self._events = events

    def reconcile_open_sessions(self, now: datetime, policy: AutoClockOutPolicy) -> ReconcileResult:
        if not policy.enabled:
            logger.info("Auto clock-out is disabled; nothing to do")
            return ReconcileResult(closed_count=0, enabled=False)

        chosen = choose_cutoff(now, policy.default_cutoff)
        used_default = chosen != now

        with self._tx.transaction():
            open_sessions = list(self._attendance.list_open_sessions())
            if not open_sessions:
                logger.info("Auto clock-out found no open sessions")
                return ReconcileResult(closed_count=0, chosen_cutoff=chosen, used_default_time=used_default)

            updates = [
                SessionClose(
                    session_id=s.session_id,
                    clock_out_time=clock_out_time_for(s, chosen),
                    auto_closed=True,
                )
                for s in open_sessions
            ]
            self._attendance.close_sessions_batch(updates)

            closed = [
                AttendanceSession(
                    session_id=s.session_id,
                    employee_id=s.employee_id,
                    clock_in_time=s.clock_in_time,
                    clock_out_time=u.clock_out_time,
                    auto_closed=True,
                )
                for s, u in zip(open_sessions, updates)
            ]

            if policy.log_events and self._events is not None:
                self._events.record(
                    event=AUTO_CLOCK_OUT_EVENT,
                    details={
                        "record_count": len(closed),
                        "default_time": policy.default_cutoff.strftime("%H:%M"),
                        "actual_time": chosen.strftime("%H:%M"),
                        "employee_ids": [s.employee_id for s in closed],
                    },
                    created_at=now,
                )

        logger.info("Auto clock-out closed %d session(s) at %s", len(closed), chosen.isoformat())
        return ReconcileResult(
            closed_count=len(closed),
            closed_sessions=closed,
            chosen_cutoff=chosen,
            used_default_time=used_default,
        )
