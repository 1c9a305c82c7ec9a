from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.http import error_response, json_body, serialize
from ..core.exceptions import ValidationError
from ..container import Container


def _optional_int(value, field_name: str):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")


def register(app: Flask, container: Container) -> None:
    ledger = container.leave_ledger

    @app.route("/api/time-off/requests", methods=["GET"], endpoint="list_time_off_requests")
    def list_time_off_requests():
        try:
            rows = ledger.list_requests(
                status=request.args.get("status") or None,
                employee_id=_optional_int(request.args.get("employee_id"), "employee_id"),
            )
            return jsonify(serialize(list(rows)))
        except Exception as e:
            return error_response(e)

    @app.route("/api/time-off/requests", methods=["POST"], endpoint="create_time_off_request")
    def create_time_off_request():
        try:
            body = json_body()
            employee_id = _optional_int(body.get("employee_id"), "employee_id")
            if employee_id is None or not body.get("request_type") or not body.get("start_date") or not body.get("end_date"):
                raise ValidationError("Employee ID, request type, start date and end date are required")

            req = ledger.create_request(
                employee_id,
                body["request_type"],
                parse_iso_date(body["start_date"]),
                parse_iso_date(body["end_date"]),
                _optional_int(body.get("duration_units"), "duration_units"),
                notes=body.get("notes") or "",
            )
            return jsonify({"request": serialize(req)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/time-off/requests/<int:request_id>", methods=["GET"], endpoint="get_time_off_request")
    def get_time_off_request(request_id: int):
        try:
            return jsonify(serialize(ledger.get_request(request_id)))
        except Exception as e:
            return error_response(e)

    @app.route("/api/time-off/requests/<int:request_id>", methods=["PUT"], endpoint="update_time_off_request")
    def update_time_off_request(request_id: int):
        try:
            body = json_body()
            if not body.get("status"):
                raise ValidationError("Valid status (approved, denied, or pending) is required")
            req = ledger.set_request_status(request_id, body["status"], body.get("notes"))
            return jsonify(serialize(req))
        except Exception as e:
            return error_response(e)

    @app.route(
        "/api/time-off/requests/<int:request_id>/unapprove",
        methods=["POST"],
        endpoint="unapprove_time_off_request",
    )
    def unapprove_time_off_request(request_id: int):
        try:
            req = ledger.unapprove_request(request_id, json_body().get("notes"))
            return jsonify(serialize(req))
        except Exception as e:
            return error_response(e)

    @app.route("/api/time-off/requests/<int:request_id>", methods=["DELETE"], endpoint="delete_time_off_request")
    def delete_time_off_request(request_id: int):
        try:
            ledger.delete_request(request_id)
            return jsonify({"success": True, "message": "Time-off request deleted successfully"})
        except Exception as e:
            return error_response(e)

    @app.route("/api/time-off/allocations", methods=["GET"], endpoint="list_allocations")
    def list_allocations():
        try:
            year = _optional_int(request.args.get("year"), "year") or now_local().year
            rows = ledger.list_allocations(
                year=year,
                employee_id=_optional_int(request.args.get("employee_id"), "employee_id"),
            )
            return jsonify(serialize(list(rows)))
        except Exception as e:
            return error_response(e)

    @app.route("/api/time-off/allocations", methods=["POST"], endpoint="upsert_allocation")
    def upsert_allocation():
        try:
            body = json_body()
            employee_id = _optional_int(body.get("employee_id"), "employee_id")
            year = _optional_int(body.get("year"), "year")
            if employee_id is None or year is None:
                raise ValidationError("Employee ID and year are required")

            allocation = ledger.upsert_allocation(
                employee_id,
                year,
                pto_total=_optional_int(body.get("pto_total"), "pto_total"),
                sick_total=_optional_int(body.get("sick_total"), "sick_total"),
            )
            return jsonify(serialize(allocation))
        except Exception as e:
            return error_response(e)
