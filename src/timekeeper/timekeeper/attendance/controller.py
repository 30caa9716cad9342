from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import (
    current_role,
    current_user_id,
    error_response,
    int_arg,
    json_body,
    login_required,
    to_int,
)
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        """Month history: admins see everybody (or ``userId``), users only themselves."""
        today = date.today()
        year = int_arg("year", today.year)
        month = int_arg("month", today.month)

        service = container.attendance_service
        if current_role() == Role.ADMIN:
            user_id = request.args.get("userId")
            if user_id:
                logs = service.history_for_month(to_int(user_id, "userId"), year=year, month=month)
            else:
                logs = service.all_for_month(year=year, month=month)
        else:
            logs = service.history_for_month(current_user_id(), year=year, month=month)

        return jsonify(
            {
                "success": True,
                "month": month,
                "year": year,
                "attendance": [log.to_dict() for log in logs],
            }
        )

    @app.route("/api/attendance/status", methods=["GET"], endpoint="attendance_status")
    @login_required
    def attendance_status():
        status = container.attendance_service.current_status(current_user_id(), now=now_local())
        return jsonify({"success": True, **status})

    @app.route("/api/attendance/dashboard", methods=["GET"], endpoint="attendance_dashboard")
    @login_required
    def attendance_dashboard():
        user_id = current_user_id()
        if current_role() == Role.ADMIN and request.args.get("userId"):
            user_id = to_int(request.args["userId"], "userId")
        data = container.attendance_service.dashboard(user_id, now=now_local())
        return jsonify({"success": True, **data})

    @app.route("/api/scan", methods=["POST"], endpoint="scan_qr")
    def scan_qr():
        """QR kiosk: the code carries the employee's name; the action toggles."""
        data = json_body()
        result = container.scan_service.scan_qr(data.get("qrCode", ""), workplace=data.get("workplace"))
        return jsonify(result.to_dict())

    @app.route("/api/scan/image", methods=["POST"], endpoint="scan_qr_image")
    def scan_qr_image():
        upload = request.files.get("image")
        if upload is None:
            return error_response("No image provided", 400)
        result = container.scan_service.scan_qr_image(upload.stream, workplace=request.form.get("workplace"))
        return jsonify(result.to_dict())

    @app.route("/api/face-scan", methods=["POST"], endpoint="face_scan")
    def face_scan():
        data = json_body()
        result = container.scan_service.scan_face(data.get("image", ""), workplace=data.get("workplace"))
        return jsonify(result.to_dict())
