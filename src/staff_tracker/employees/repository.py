from __future__ import annotations

from typing import Protocol, Sequence

from .model import Employee, EmployeeFields


class EmployeeRepository(Protocol):
    """Roster data source. Services depend on this interface, not on HTTP."""

    def get_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, fields: EmployeeFields) -> Employee:
        raise NotImplementedError

    def update(self, employee_id: int, fields: EmployeeFields) -> Employee:
        raise NotImplementedError

    def delete(self, employee_id: int) -> bool:
        raise NotImplementedError
