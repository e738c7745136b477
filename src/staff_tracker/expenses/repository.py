from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import Expense, ExpenseDraft


class ExpenseRepository(Protocol):
    def get_all(self) -> Sequence[Expense]:
        raise NotImplementedError

    def get_by_date(self, work_date: date) -> Sequence[Expense]:
        raise NotImplementedError

    def get_range(self, start: date, end: date) -> Sequence[Expense]:
        raise NotImplementedError

    def create(self, draft: ExpenseDraft) -> Expense:
        raise NotImplementedError

    def delete(self, expense_id: str) -> bool:
        raise NotImplementedError
