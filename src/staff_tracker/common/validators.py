from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"Please enter {field_name}")
    return str(value).strip()


def require_positive_amount(value: Any, field_name: str = "a valid amount") -> Decimal:
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Please enter {field_name}")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError(f"Please enter {field_name}")
    return amount


def require_int(value: Any, message: str) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(message)


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on", "present"}:
        return True
    if text in {"0", "false", "no", "off", "absent"}:
        return False
    raise ValidationError(f"Invalid flag: {value!r}")
