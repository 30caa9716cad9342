from __future__ import annotations

import csv
import io
from datetime import date, timedelta

from flask import Flask, jsonify

from ..common.datetime_utils import now_local
from ..common.serializers import absence_to_dict, late_to_dict, presence_to_dict
from ..common.web import admin_required, current_role, date_arg
from ..core.enums import DayStatus
from ..container import Container

TIMESHEET_FIELDS = [
    "work_date",
    "user_id",
    "name",
    "email",
    "first_clock_in",
    "last_clock_out",
    "sessions",
    "worked_hours",
    "late",
]


def register(app: Flask, container: Container) -> None:
    def _write_report_csv(*, rows: list[dict], filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=TIMESHEET_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/present", methods=["GET"], endpoint="report_present")
    @admin_required
    def report_present():
        day = date_arg("date", date.today())
        rows = container.report_service.present(current_role=current_role(), day=day, now=now_local())
        present = [r for r in rows if r.status == DayStatus.PRESENT]
        return jsonify(
            {
                "success": True,
                "date": day.isoformat(),
                "totalUsers": len(rows),
                "presentCount": len(present),
                "absentCount": len(rows) - len(present),
                "users": [presence_to_dict(r) for r in rows],
            }
        )

    @app.route("/api/reports/lates", methods=["GET"], endpoint="report_lates")
    @admin_required
    def report_lates():
        end = date_arg("endDate", date.today())
        start = date_arg("startDate", end - timedelta(days=6))
        entries = container.report_service.lates(current_role=current_role(), start=start, end=end, now=now_local())
        return jsonify({"success": True, "lates": [late_to_dict(e) for e in entries], "total": len(entries)})

    @app.route("/api/reports/absences", methods=["GET"], endpoint="report_absences")
    @admin_required
    def report_absences():
        start = date_arg("startDate")
        end = date_arg("endDate")
        entries = container.report_service.absences(current_role=current_role(), start=start, end=end, now=now_local())
        return jsonify({"success": True, "absences": [absence_to_dict(e) for e in entries], "total": len(entries)})

    @app.route("/api/reports/timesheet.csv", methods=["GET"], endpoint="report_timesheet_csv")
    @admin_required
    def report_timesheet_csv():
        start = date_arg("startDate")
        end = date_arg("endDate")
        data = container.report_service.timesheet(current_role=current_role(), start=start, end=end, now=now_local())
        filename = f"timesheet_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return _write_report_csv(rows=data.rows, filename=filename)
