from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.datekey import to_key
from ..gateway.connection import ApiConnection
from ..gateway.http_base import api_call, as_list, as_object
from .model import Expense, ExpenseDraft
from .repository import ExpenseRepository


class HttpExpenseRepository(ExpenseRepository):
    PATH = "/api/expenses"

    def __init__(self, connection: ApiConnection):
        self._connection = connection

    def _list(self, path: str, params=None) -> Sequence[Expense]:
        rows = as_list(api_call(self._connection, "GET", path, params=params), path)
        return [Expense.from_api(r) for r in rows]

    def get_all(self) -> Sequence[Expense]:
        return self._list(self.PATH)

    def get_by_date(self, work_date: date) -> Sequence[Expense]:
        return self._list(f"{self.PATH}/date/{to_key(work_date)}")

    def get_range(self, start: date, end: date) -> Sequence[Expense]:
        return self._list(f"{self.PATH}/range", params={"startDate": to_key(start), "endDate": to_key(end)})

    def create(self, draft: ExpenseDraft) -> Expense:
        payload = api_call(self._connection, "POST", self.PATH, json=draft.to_api())
        return Expense.from_api(as_object(payload, self.PATH))

    def delete(self, expense_id: str) -> bool:
        api_call(self._connection, "DELETE", f"{self.PATH}/{expense_id}")
        return True
