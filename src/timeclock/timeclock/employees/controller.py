from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import error_response, json_body, serialize
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    def list_employees():
        try:
            return jsonify(serialize(list(container.employee_service.list_all())))
        except Exception as e:
            return error_response(e)

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    def create_employee():
        try:
            body = json_body()
            employee = container.employee_service.create(name=body.get("name"), pay_rate=body.get("pay_rate"))
            return jsonify(serialize(employee)), 201
        except Exception as e:
            return error_response(e)

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="get_employee")
    def get_employee(employee_id: int):
        try:
            return jsonify(serialize(container.employee_service.get(employee_id)))
        except Exception as e:
            return error_response(e)

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="update_employee")
    def update_employee(employee_id: int):
        try:
            body = json_body()
            employee = container.employee_service.update(
                employee_id,
                name=body.get("name"),
                pay_rate=body.get("pay_rate"),
            )
            return jsonify(serialize(employee))
        except Exception as e:
            return error_response(e)

    @app.route("/api/employees/<int:employee_id>", methods=["DELETE"], endpoint="delete_employee")
    def delete_employee(employee_id: int):
        try:
            container.employee_service.delete(employee_id)
            return jsonify({"success": True})
        except Exception as e:
            return error_response(e)
