from __future__ import annotations

import logging

from flask import Flask, current_app, flash, redirect, request, send_file, url_for

from ..activity.feed import format_activity_message
from ..activity.model import event_to_dict
from ..common.datekey import to_key, today_local
from ..common.web import view
from ..container import Container
from ..core.exceptions import FetchError, ValidationError
from ..employees.model import resolve_name
from .export import XLSX_MIMETYPE, display_date
from .filters import FilterSpec, month_label, month_options

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    reports_service = container.report_service

    def _spec() -> FilterSpec:
        try:
            return FilterSpec.from_args(request.args, today=today_local())
        except ValidationError as e:
            flash(str(e), "warning")
            return FilterSpec.default(today_local())

    def _empty(spec: FilterSpec):
        return {
            "filters": spec.as_dict(),
            "month_label": month_label(spec.month),
            "month_options": month_options(today_local()),
            "employees": [],
            "attendance": {"stats": None, "groups": []},
            "expenses": {"stats": None, "rows": []},
            "recent_activity": [],
        }

    @app.route("/reports", endpoint="reports")
    def reports():
        spec = _spec()
        currency = current_app.config["CURRENCY_SYMBOL"]
        try:
            agg = reports_service.aggregator(spec)
            recent = reports_service.recent_activity(agg, limit=current_app.config["REPORT_ACTIVITY_LIMIT"])
        except FetchError as e:
            flash(str(e), "danger")
            return view(_empty(spec))

        names = agg.names
        groups = [
            {
                "date": g.date_key,
                "label": f"{g.work_date:%a, %b} {g.work_date.day}, {g.work_date.year}",
                "records": [
                    {"employee_id": r.employee_id, "employee": resolve_name(names, r.employee_id), "present": r.present}
                    for r in g.records
                ],
            }
            for g in agg.grouped_attendance()
        ]
        expenses = [
            {
                "id": e.expense_id,
                "date": e.date_key,
                "display_date": display_date(e.work_date),
                "employee": resolve_name(names, e.employee_id),
                "amount": f"{e.amount:.2f}",
                "category": e.category.value,
                "description": e.description,
            }
            for e in agg.filtered_expenses()
        ]
        activity = []
        for event in recent:
            item = event_to_dict(event)
            item["message"] = format_activity_message(event, names, currency=currency)
            activity.append(item)

        return view(
            {
                "filters": spec.as_dict(),
                "month_label": month_label(spec.month),
                "month_options": month_options(today_local()),
                "employees": [{"id": eid, "name": name} for eid, name in names.items()],
                "attendance": {"stats": agg.attendance_stats().as_dict(), "groups": groups},
                "expenses": {"stats": agg.expense_stats().as_dict(), "rows": expenses},
                "currency": currency,
                "recent_activity": activity,
                "generated_on": to_key(today_local()),
            }
        )

    def _download(result):
        if result is None:
            flash("There is no data to export for the selected filters", "info")
            return redirect(url_for("reports", **request.args))
        buf, filename = result
        return send_file(buf, mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=filename)

    @app.route("/reports/export/attendance", endpoint="export_attendance")
    def export_attendance():
        spec = _spec()
        try:
            return _download(reports_service.export_attendance(spec))
        except FetchError as e:
            flash(str(e), "danger")
            return redirect(url_for("reports", **request.args))

    @app.route("/reports/export/expenses", endpoint="export_expenses")
    def export_expenses():
        spec = _spec()
        try:
            return _download(reports_service.export_expenses(spec, currency=current_app.config["CURRENCY_SYMBOL"]))
        except FetchError as e:
            flash(str(e), "danger")
            return redirect(url_for("reports", **request.args))
