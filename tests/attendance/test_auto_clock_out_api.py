from __future__ import annotations

from datetime import datetime, time
from types import SimpleNamespace

import pytest
from flask import Flask

from src.timeclock.timeclock.attendance import controller as attendance_controller
from src.timeclock.timeclock.attendance.model import AttendanceSession
from src.timeclock.timeclock.attendance.reconciler import AutoClockOutPolicy, ReconcileResult


class StubAutoClockOut:
    def __init__(self, enabled=True):
        self.policy = AutoClockOutPolicy(enabled=enabled, default_cutoff=time(17, 30))
        self.cutoffs = []

    def run_once(self, now=None, *, cutoff=None):
        self.cutoffs.append(cutoff)
        policy = self.policy.with_cutoff(cutoff) if cutoff else self.policy
        chosen = datetime.combine(datetime(2025, 3, 3).date(), policy.default_cutoff)
        closed = AttendanceSession("s1", 1001, datetime(2025, 3, 3, 9, 0), chosen, auto_closed=True)
        return ReconcileResult(closed_count=1, closed_sessions=[closed], chosen_cutoff=chosen, used_default_time=True)


def make_client(stub):
    app = Flask(__name__)
    attendance_controller.register(app, SimpleNamespace(auto_clock_out=stub))
    return app.test_client()


def test_manual_run_uses_default_time_override():
    stub = StubAutoClockOut()

    res = make_client(stub).post("/api/auto-clock-out", json={"default_time": "18:00"})

    assert res.status_code == 200
    body = res.get_json()
    assert stub.cutoffs == ["18:00"]
    assert body["clocked_out"] == 1
    assert body["used_time"] == "18:00"
    assert body["records"][0]["auto_closed"] is True


def test_manual_run_without_body_uses_configured_time():
    stub = StubAutoClockOut()

    res = make_client(stub).post("/api/auto-clock-out")

    assert stub.cutoffs == [None]
    assert res.get_json()["used_time"] == "17:30"


@pytest.mark.parametrize("value", ["25:00", "5pm"])
def test_invalid_override_is_rejected(value):
    res = make_client(StubAutoClockOut()).post("/api/auto-clock-out", json={"default_time": value})

    assert res.status_code == 400


def test_disabled_policy_reports_without_running():
    stub = StubAutoClockOut(enabled=False)

    res = make_client(stub).post("/api/auto-clock-out", json={})

    assert res.get_json()["success"] is False
    assert stub.cutoffs == []
