from __future__ import annotations

import logging
from typing import Any, Dict, List

from flask import Flask, current_app, flash, request

from ..common.datekey import to_key, today_local
from ..common.web import view
from ..container import Container
from ..core.enums import ExpenseCategory
from ..core.exceptions import FetchError, NotFoundError, SaveError, ValidationError
from ..employees.model import resolve_name
from .model import Expense

logger = logging.getLogger(__name__)


def _expense_dict(e: Expense, names: Dict[int, str]) -> Dict[str, Any]:
    return {
        "id": e.expense_id,
        "employee_id": e.employee_id,
        "employee": resolve_name(names, e.employee_id),
        "date": e.date_key,
        "amount": f"{e.amount:.2f}",
        "category": e.category.value,
        "description": e.description,
    }


def register(app: Flask, container: Container) -> None:
    def _page(status: int = 200):
        today = today_local()
        employees: List = []
        expenses: List[Expense] = []
        try:
            employees = list(container.employee_service.list_all())
            expenses = list(container.expense_service.list_today(today=today))
        except FetchError as e:
            flash(str(e), "danger")

        names = container.employee_service.names_by_id(employees)
        return view(
            {
                "date": to_key(today),
                "currency": current_app.config["CURRENCY_SYMBOL"],
                "categories": [c.value for c in ExpenseCategory],
                "employees": [{"id": e.employee_id, "name": e.name} for e in employees],
                "expenses": [_expense_dict(e, names) for e in expenses],
            },
            status,
        )

    @app.route("/expenses", methods=["GET", "POST"], endpoint="expenses")
    def expenses():
        if request.method == "POST":
            try:
                container.expense_service.create(
                    employee_id=request.form.get("employee_id"),
                    amount=request.form.get("amount"),
                    category=request.form.get("category"),
                    description=request.form.get("description"),
                )
                flash("Expense added successfully", "success")
            except ValidationError as e:
                flash(str(e), "warning")
                return _page(400)
            except SaveError as e:
                flash(str(e), "danger")
                return _page(502)
        return _page()

    @app.route("/expenses/<expense_id>/delete", methods=["POST"], endpoint="expense_delete")
    def expense_delete(expense_id: str):
        try:
            container.expense_service.delete(expense_id)
            flash("Expense deleted successfully", "success")
        except NotFoundError as e:
            flash(str(e), "warning")
            return _page(404)
        except SaveError as e:
            flash(str(e), "danger")
            return _page(502)
        return _page()
