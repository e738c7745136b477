from __future__ import annotations

import logging
from typing import Dict, Sequence

from ..common.errors import translate_api_errors
from ..common.validators import require_non_empty
from ..core.exceptions import FetchError, NotFoundError, SaveError
from .model import Employee, EmployeeFields
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: manage the employee roster."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_all(self) -> Sequence[Employee]:
        with translate_api_errors(FetchError, "Failed to load data. Please try again."):
            return list(self._employees.get_all())

    def names_by_id(self, employees: Sequence[Employee]) -> Dict[int, str]:
        return {e.employee_id: e.name for e in employees}

    @staticmethod
    def _fields(*, name: str, position: str, email: str, phone: str) -> EmployeeFields:
        return EmployeeFields(
            name=require_non_empty(name, "a name"),
            position=(position or "").strip(),
            email=(email or "").strip(),
            phone=(phone or "").strip(),
        )

    def create(self, *, name: str, position: str = "", email: str = "", phone: str = "") -> Employee:
        fields = self._fields(name=name, position=position, email=email, phone=phone)
        with translate_api_errors(SaveError, "Failed to save employee. Please try again."):
            employee = self._employees.create(fields)
        logger.info("Employee %s created", employee.employee_id)
        return employee

    def update(self, employee_id: int, *, name: str, position: str = "", email: str = "", phone: str = "") -> Employee:
        fields = self._fields(name=name, position=position, email=email, phone=phone)
        with translate_api_errors(SaveError, "Failed to save employee. Please try again.", not_found="Employee not found"):
            return self._employees.update(int(employee_id), fields)

    def delete(self, employee_id: int) -> None:
        # Attendance and expense rows of a deleted employee are kept; they resolve to "Unknown".
        with translate_api_errors(SaveError, "Failed to delete employee. Please try again.", not_found="Employee not found"):
            ok = self._employees.delete(int(employee_id))
        if not ok:
            raise NotFoundError("Employee not found")
        logger.info("Employee %s deleted", employee_id)
