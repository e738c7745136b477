from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from ..core.exceptions import ValidationError

UNKNOWN_NAME = "Unknown"


@dataclass(frozen=True)
class Employee:
    """Roster entry. Referenced by ``employee_id`` from every other record."""

    employee_id: int
    name: str
    position: str = ""
    email: str = ""
    phone: str = ""

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "Employee":
        try:
            employee_id = int(payload["id"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError(f"Employee without a valid id: {payload!r}")
        name = str(payload.get("name") or "").strip()
        if not name:
            raise ValidationError(f"Employee {employee_id} has no name")
        return cls(
            employee_id=employee_id,
            name=name,
            position=str(payload.get("position") or ""),
            email=str(payload.get("email") or ""),
            phone=str(payload.get("phone") or ""),
        )

    def to_api(self) -> Dict[str, Any]:
        return {
            "id": self.employee_id,
            "name": self.name,
            "position": self.position,
            "email": self.email,
            "phone": self.phone,
        }


@dataclass(frozen=True)
class EmployeeFields:
    """Editable roster fields (create/update payload)."""

    name: str
    position: str = ""
    email: str = ""
    phone: str = ""

    def to_api(self) -> Dict[str, Any]:
        return {"name": self.name, "position": self.position, "email": self.email, "phone": self.phone}


def resolve_name(names: Mapping[int, str], employee_id: Optional[int]) -> str:
    if employee_id is None:
        return UNKNOWN_NAME
    return names.get(employee_id, UNKNOWN_NAME)
