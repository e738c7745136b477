from __future__ import annotations

import logging
from datetime import date
from typing import Any, Optional, Sequence

from ..common.datekey import today_local
from ..common.errors import translate_api_errors
from ..common.validators import require_int, require_non_empty, require_positive_amount
from ..core.enums import ExpenseCategory
from ..core.exceptions import FetchError, NotFoundError, SaveError, ValidationError
from .model import Expense, ExpenseDraft, parse_category
from .repository import ExpenseRepository

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = ExpenseCategory.MATERIALS


class ExpenseService:
    """Use case: log and remove expenses."""

    def __init__(self, expenses: ExpenseRepository):
        self._expenses = expenses

    def list_all(self) -> Sequence[Expense]:
        with translate_api_errors(FetchError, "Failed to load data. Please try again."):
            return list(self._expenses.get_all())

    def list_for(self, work_date: date) -> Sequence[Expense]:
        with translate_api_errors(FetchError, "Failed to load data. Please try again."):
            return list(self._expenses.get_by_date(work_date))

    def list_today(self, *, today: Optional[date] = None) -> Sequence[Expense]:
        return self.list_for(today or today_local())

    @staticmethod
    def build_draft(
        *,
        employee_id: Any,
        amount: Any,
        category: Any,
        description: Any,
        work_date: date,
    ) -> ExpenseDraft:
        """Validate form input. Nothing is sent to the API when this raises."""

        if employee_id in (None, ""):
            raise ValidationError("Please select an employee")
        eid = require_int(employee_id, "Please select an employee")
        if eid <= 0:
            raise ValidationError("Please select an employee")

        value = require_positive_amount(amount)
        text = require_non_empty(description, "a description")

        try:
            cat = parse_category(category) if category else DEFAULT_CATEGORY
        except ValidationError:
            raise ValidationError("Please select a valid category")

        return ExpenseDraft(employee_id=eid, work_date=work_date, amount=value, category=cat, description=text)

    def create(
        self,
        *,
        employee_id: Any,
        amount: Any,
        description: Any,
        category: Any = None,
        today: Optional[date] = None,
    ) -> Expense:
        draft = self.build_draft(
            employee_id=employee_id,
            amount=amount,
            category=category,
            description=description,
            work_date=today or today_local(),
        )
        with translate_api_errors(SaveError, "Failed to add expense. Please try again."):
            expense = self._expenses.create(draft)
        logger.info("Expense %s created for employee %s", expense.expense_id, expense.employee_id)
        return expense

    def delete(self, expense_id: str) -> None:
        expense_id = str(expense_id or "").strip()
        if not expense_id:
            raise ValidationError("Missing expense id")
        with translate_api_errors(SaveError, "Failed to delete expense. Please try again.", not_found="Expense not found"):
            ok = self._expenses.delete(expense_id)
        if not ok:
            raise NotFoundError("Expense not found")
        logger.info("Expense %s deleted", expense_id)
