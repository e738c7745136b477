from __future__ import annotations

from typing import Sequence

from ..gateway.connection import ApiConnection
from ..gateway.http_base import api_call, as_list, as_object
from .model import Employee, EmployeeFields
from .repository import EmployeeRepository


class HttpEmployeeRepository(EmployeeRepository):
    PATH = "/api/employees"

    def __init__(self, connection: ApiConnection):
        self._connection = connection

    def get_all(self) -> Sequence[Employee]:
        rows = as_list(api_call(self._connection, "GET", self.PATH), self.PATH)
        return [Employee.from_api(r) for r in rows]

    def create(self, fields: EmployeeFields) -> Employee:
        payload = api_call(self._connection, "POST", self.PATH, json=fields.to_api())
        return Employee.from_api(as_object(payload, self.PATH))

    def update(self, employee_id: int, fields: EmployeeFields) -> Employee:
        path = f"{self.PATH}/{int(employee_id)}"
        payload = api_call(self._connection, "PUT", path, json={"id": int(employee_id), **fields.to_api()})
        return Employee.from_api(as_object(payload, path))

    def delete(self, employee_id: int) -> bool:
        api_call(self._connection, "DELETE", f"{self.PATH}/{int(employee_id)}")
        return True
