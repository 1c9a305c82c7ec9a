from __future__ import annotations

from datetime import datetime

from flask import Flask, jsonify, request

from ..common.http import error_response, json_body, serialize
from ..core.exceptions import ValidationError
from ..container import Container


def _parse_datetime(value, field_name: str):
    if value in (None, ""):
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO datetime")


def _require_employee_id(body: dict) -> int:
    try:
        return int(body.get("employee_id"))
    except (TypeError, ValueError):
        raise ValidationError("Employee ID is required")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/clock/in", methods=["POST"], endpoint="clock_in")
    def clock_in():
        try:
            session = container.attendance_service.clock_in(_require_employee_id(json_body()))
            return jsonify({"success": True, "message": "Clocked in successfully!", "record": serialize(session)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/clock/out", methods=["POST"], endpoint="clock_out")
    def clock_out():
        try:
            session = container.attendance_service.clock_out(_require_employee_id(json_body()))
            return jsonify({"success": True, "message": "Clocked out successfully!", "record": serialize(session)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/time-records", methods=["GET"], endpoint="time_records")
    def time_records():
        try:
            return jsonify(serialize(list(container.attendance_service.list_all())))
        except Exception as e:
            return error_response(e)

    @app.route("/api/time-records/<int:employee_id>", methods=["GET"], endpoint="employee_time_records")
    def employee_time_records(employee_id: int):
        try:
            return jsonify(serialize(list(container.attendance_service.history(employee_id))))
        except Exception as e:
            return error_response(e)

    @app.route("/api/time-records", methods=["PUT"], endpoint="update_time_record")
    def update_time_record():
        try:
            body = json_body()
            session_id = body.get("id")
            if not session_id:
                raise ValidationError("Time record ID is required")
            clock_in_time = _parse_datetime(body.get("clock_in_time"), "clock_in_time")
            if clock_in_time is None:
                raise ValidationError("clock_in_time is required")

            updated = container.attendance_service.update_session(
                str(session_id),
                clock_in_time=clock_in_time,
                clock_out_time=_parse_datetime(body.get("clock_out_time"), "clock_out_time"),
            )
            return jsonify(serialize(updated))
        except Exception as e:
            return error_response(e)

    @app.route("/api/time-records", methods=["DELETE"], endpoint="delete_time_record")
    def delete_time_record():
        try:
            session_id = request.args.get("id")
            if not session_id:
                raise ValidationError("Time record ID is required")
            container.attendance_service.delete_session(session_id)
            return jsonify({"success": True, "message": "Time record deleted successfully"})
        except Exception as e:
            return error_response(e)

    @app.route("/api/auto-clock-out", methods=["POST"], endpoint="auto_clock_out")
    def auto_clock_out():
        try:
            if not container.auto_clock_out.policy.enabled:
                return jsonify({"success": False, "message": "Auto clock-out is disabled in configuration"})

            result = container.auto_clock_out.run_once(cutoff=json_body().get("default_time"))
            return jsonify(
                {
                    "success": True,
                    "message": f"Successfully auto-clocked out {result.closed_count} employees",
                    "clocked_out": result.closed_count,
                    "using_default_time": result.used_default_time,
                    "used_time": result.chosen_cutoff.strftime("%H:%M") if result.chosen_cutoff else None,
                    "records": serialize(list(result.closed_sessions)),
                }
            )
        except Exception as e:
            return error_response(e)
