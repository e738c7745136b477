from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Mapping

from ..common.datekey import parse_key, to_key
from ..core.enums import ExpenseCategory
from ..core.exceptions import ValidationError


def parse_category(value: Any) -> ExpenseCategory:
    try:
        return ExpenseCategory(str(value or "").strip())
    except ValueError:
        raise ValidationError(f"Unknown expense category: {value!r}")


@dataclass(frozen=True)
class ExpenseDraft:
    """Validated fields of a new expense, ready to be posted."""

    employee_id: int
    work_date: date
    amount: Decimal
    category: ExpenseCategory
    description: str

    def to_api(self) -> Dict[str, Any]:
        return {
            "employeeId": self.employee_id,
            "date": to_key(self.work_date),
            "amount": str(self.amount),
            "category": self.category.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class Expense:
    """Server-assigned expense entry. There is no update; only create and delete."""

    expense_id: str
    employee_id: int
    work_date: date
    amount: Decimal
    category: ExpenseCategory
    description: str

    @property
    def date_key(self) -> str:
        return to_key(self.work_date)

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Expense":
        if payload.get("id") is None:
            raise ValidationError(f"Expense without id: {payload!r}")
        try:
            employee_id = int(payload["employeeId"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError(f"Expense without employeeId: {payload!r}")
        try:
            amount = Decimal(str(payload.get("amount")))
        except (InvalidOperation, ValueError):
            raise ValidationError(f"Expense with invalid amount: {payload!r}")
        if not amount.is_finite():
            raise ValidationError(f"Expense with invalid amount: {payload!r}")
        return cls(
            expense_id=str(payload["id"]),
            employee_id=employee_id,
            work_date=parse_key(str(payload.get("date") or "")),
            amount=amount,
            category=parse_category(payload.get("category")),
            description=str(payload.get("description") or ""),
        )
