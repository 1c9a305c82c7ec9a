from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from ..attendance.reconciler import AttendanceReconciler, AutoClockOutPolicy, ReconcileResult
from ..common.datetime_utils import now_local, parse_cutoff_time
from ..core.constants import DEFAULT_RUN_AT

logger = logging.getLogger(__name__)


class AutoClockOutScheduler:
    """Daily trigger for the automatic clock-out job.

    Owned by the application; each run passes an explicit ``now`` and policy
    to the reconciler.
    """

    JOB_ID = "auto_clock_out"

    def __init__(
        self,
        reconciler: AttendanceReconciler,
        policy: AutoClockOutPolicy,
        *,
        run_at: str = DEFAULT_RUN_AT,
        clock: Callable[[], datetime] = now_local,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        self._reconciler = reconciler
        self._policy = policy
        self._run_at = parse_cutoff_time(run_at)
        self._clock = clock
        self._scheduler = scheduler or BackgroundScheduler(daemon=True)

    @property
    def policy(self) -> AutoClockOutPolicy:
        return self._policy

    @property
    def running(self) -> bool:
        return bool(self._scheduler.running)

    def start(self) -> bool:
        """Register the daily job and start the scheduler. No-op when the policy is disabled."""
        if not self._policy.enabled:
            logger.info("Auto clock-out is disabled. Scheduler not started.")
            return False

        self._scheduler.add_job(
            self.run_once,
            trigger=CronTrigger(hour=self._run_at.hour, minute=self._run_at.minute),
            id=self.JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if not self._scheduler.running:
            self._scheduler.start()
        logger.info("Auto clock-out scheduled daily at %s", self._run_at.strftime("%H:%M"))
        return True

    def run_once(self, now: Optional[datetime] = None, *, cutoff: Optional[str] = None) -> ReconcileResult:
        """Manual trigger; ``cutoff`` overrides the policy time for this run only."""
        policy = self._policy.with_cutoff(cutoff) if cutoff else self._policy
        now = now or self._clock()
        logger.info("Running auto clock-out at %s", now.isoformat())
        return self._reconciler.reconcile_open_sessions(now, policy)

    def shutdown(self) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            logger.info("Auto clock-out scheduler stopped")
