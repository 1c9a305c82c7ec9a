from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import error_response, serialize
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/<int:employee_id>", methods=["GET"], endpoint="employee_timesheet")
    def employee_timesheet(employee_id: int):
        try:
            start = request.args.get("start")
            end = request.args.get("end")
            timesheet = container.payroll_report_service.build_timesheet(
                employee_id,
                start=parse_iso_date(start) if start else None,
                end=parse_iso_date(end) if end else None,
            )
            return jsonify(serialize(timesheet))
        except Exception as e:
            return error_response(e)
