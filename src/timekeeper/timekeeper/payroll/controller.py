from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import admin_required, error_response, json_body, to_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/rate", methods=["POST"], endpoint="rate_calculator")
    @admin_required
    def rate_calculator():
        data = json_body()
        if not data.get("userId") or not data.get("startDate") or not data.get("endDate"):
            return error_response("User, start date and end date are required", 400)

        result = container.rate_service.calculate(
            user_id=to_int(data["userId"], "userId"),
            start=parse_iso_date(data["startDate"], "startDate"),
            end=parse_iso_date(data["endDate"], "endDate"),
            hourly_rate=data.get("hourlyRate"),
            now=now_local(),
        )
        return jsonify({"success": True, **result.to_dict()})
