from __future__ import annotations

from datetime import date, datetime
from types import SimpleNamespace

import pytest
from flask import Flask

from src.timeclock.timeclock.core.enums import LeaveType, RequestStatus
from src.timeclock.timeclock.core.exceptions import AlreadyProcessed, NotFound, QuotaExceeded, StorageFailure
from src.timeclock.timeclock.leave import controller as leave_controller
from src.timeclock.timeclock.leave.model import LeaveRequest

REQUEST = LeaveRequest(
    request_id=7,
    employee_id=1001,
    request_type=LeaveType.PTO,
    start_date=date(2025, 3, 3),
    end_date=date(2025, 3, 7),
    duration_units=5,
    status=RequestStatus.PENDING,
    created_at=datetime(2025, 2, 1, 9, 0),
)


class StubLedger:
    def __init__(self):
        self.created = []
        self.raise_on_status = None

    def create_request(self, employee_id, request_type, start_date, end_date, duration_units=None, *, notes=""):
        self.created.append((employee_id, request_type, start_date, end_date, duration_units, notes))
        if duration_units and duration_units > 10:
            raise QuotaExceeded(requested=duration_units, available=10, leave_type="PTO")
        return REQUEST

    def get_request(self, request_id):
        if request_id != REQUEST.request_id:
            raise NotFound(f"Time-off request not found: {request_id}")
        return REQUEST

    def set_request_status(self, request_id, new_status, notes=None):
        if self.raise_on_status:
            raise self.raise_on_status
        return REQUEST


@pytest.fixture()
def ledger():
    return StubLedger()


@pytest.fixture()
def client(ledger):
    app = Flask(__name__)
    leave_controller.register(app, SimpleNamespace(leave_ledger=ledger))
    return app.test_client()


def test_create_request_parses_body(client, ledger):
    res = client.post(
        "/api/time-off/requests",
        json={"employee_id": "1001", "request_type": "PTO", "start_date": "2025-03-03", "end_date": "2025-03-07"},
    )

    assert res.status_code == 200
    body = res.get_json()
    assert body["request"]["status"] == "pending"
    assert body["request"]["start_date"] == "2025-03-03"
    assert ledger.created[0] == (1001, "PTO", date(2025, 3, 3), date(2025, 3, 7), None, "")


def test_create_request_missing_fields(client):
    res = client.post("/api/time-off/requests", json={"employee_id": 1001})

    assert res.status_code == 400
    assert "required" in res.get_json()["error"]


def test_quota_exceeded_reports_requested_and_available(client):
    res = client.post(
        "/api/time-off/requests",
        json={
            "employee_id": 1001,
            "request_type": "PTO",
            "start_date": "2025-03-03",
            "end_date": "2025-03-21",
            "duration_units": 15,
        },
    )

    assert res.status_code == 400
    assert res.get_json() == {"error": "Not enough PTO days remaining", "requested": 15, "available": 10}


def test_processed_request_conflict(client, ledger):
    ledger.raise_on_status = AlreadyProcessed(request_id=7, current="approved", requested="denied")

    res = client.put("/api/time-off/requests/7", json={"status": "denied"})

    assert res.status_code == 409
    assert res.get_json()["error"] == "Cannot modify a request that has already been processed"


def test_storage_failure_is_503(client, ledger):
    ledger.raise_on_status = StorageFailure("lost connection")

    res = client.put("/api/time-off/requests/7", json={"status": "approved"})

    assert res.status_code == 503
    assert "lost connection" not in res.get_json()["error"]


def test_unknown_request_is_404(client):
    assert client.get("/api/time-off/requests/99").status_code == 404
    assert client.get("/api/time-off/requests/7").get_json()["request_id"] == 7
