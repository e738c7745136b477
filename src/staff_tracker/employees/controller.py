from __future__ import annotations

from flask import Flask, flash, request

from ..common.web import view
from ..container import Container
from ..core.exceptions import FetchError, NotFoundError, SaveError, ValidationError


def register(app: Flask, container: Container) -> None:
    def _form() -> dict:
        return {
            "name": request.form.get("name", ""),
            "position": request.form.get("position", ""),
            "email": request.form.get("email", ""),
            "phone": request.form.get("phone", ""),
        }

    def _page(status: int = 200):
        employees = []
        try:
            employees = list(container.employee_service.list_all())
        except FetchError as e:
            flash(str(e), "danger")
        return view({"employees": [e.to_api() for e in employees]}, status)

    def _mutate(action, success: str):
        try:
            action()
            flash(success, "success")
        except ValidationError as e:
            flash(str(e), "warning")
            return _page(400)
        except NotFoundError as e:
            flash(str(e), "warning")
            return _page(404)
        except SaveError as e:
            flash(str(e), "danger")
            return _page(502)
        return _page()

    @app.route("/employees", methods=["GET", "POST"], endpoint="employees")
    def employees():
        if request.method == "POST":
            return _mutate(lambda: container.employee_service.create(**_form()), "Employee created successfully")
        return _page()

    @app.route("/employees/<int:employee_id>", methods=["POST"], endpoint="employee_update")
    def employee_update(employee_id: int):
        return _mutate(
            lambda: container.employee_service.update(employee_id, **_form()), "Employee updated successfully"
        )

    @app.route("/employees/<int:employee_id>/delete", methods=["POST"], endpoint="employee_delete")
    def employee_delete(employee_id: int):
        return _mutate(lambda: container.employee_service.delete(employee_id), "Employee deleted successfully")
