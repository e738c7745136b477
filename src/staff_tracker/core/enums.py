from __future__ import annotations

from enum import Enum


class ExpenseCategory(str, Enum):
    """Expense categories accepted by the API."""

    MATERIALS = "Materials"
    TRANSPORTATION = "Transportation"
    TOOLS = "Tools"
    OFFICE_SUPPLIES = "Office Supplies"
    MEALS = "Meals"
    OTHER = "Other"


class ActivityType(str, Enum):
    ATTENDANCE = "attendance"
    EXPENSE = "expense"
    LENDING = "lending"


class SortBy(str, Enum):
    DATE = "date"
    NAME = "name"
    STATUS = "status"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
