from __future__ import annotations

import io
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence

import pandas as pd
from openpyxl.utils import get_column_letter

from ..core.constants import DEFAULT_CURRENCY_SYMBOL
from ..attendance.model import AttendanceRecord
from ..employees.model import resolve_name
from ..expenses.model import Expense

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_NAME = "Report"

Rows = List[List[Any]]


def display_date(value: date) -> str:
    # M/D/YYYY
    return f"{value.month}/{value.day}/{value.year}"


def attendance_rows(records: Sequence[AttendanceRecord], names: Mapping[int, str]) -> Optional[Rows]:
    """Header row plus one row per record; None when there is nothing to export."""
    if not records:
        return None
    rows: Rows = [["Date", "Employee", "Status"]]
    for r in records:
        rows.append([display_date(r.work_date), resolve_name(names, r.employee_id), "Present" if r.present else "Absent"])
    return rows


def expense_rows(
    records: Sequence[Expense], names: Mapping[int, str], *, currency: str = DEFAULT_CURRENCY_SYMBOL
) -> Optional[Rows]:
    if not records:
        return None
    rows: Rows = [["Date", "Employee", f"Amount ({currency})", "Category", "Description"]]
    for e in records:
        rows.append(
            [
                display_date(e.work_date),
                resolve_name(names, e.employee_id),
                f"{e.amount:.2f}",
                e.category.value,
                e.description,
            ]
        )
    return rows


def rows_to_xlsx(rows: Rows, *, sheet_name: str = SHEET_NAME) -> io.BytesIO:
    """Write header + data rows to an in-memory workbook (never touches disk)."""

    df = pd.DataFrame(rows[1:], columns=rows[0])

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
        ws = writer.sheets[sheet_name]
        for idx, column in enumerate(df.columns, start=1):
            width = max([len(str(column))] + [len(str(v)) for v in df[column].tolist()])
            ws.column_dimensions[get_column_letter(idx)].width = min(width + 2, 60)

    output.seek(0)
    return output


def export_filename(kind: str, month: str) -> str:
    return f"{kind}-report-{month}.xlsx"
