from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_role, current_user_id, json_body, login_required, to_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _optional_date(value, field_name: str):
        return parse_iso_date(value, field_name) if value else None

    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    @login_required
    def list_leaves():
        user_id = request.args.get("userId")
        leaves = container.leave_service.list_leaves(
            current_role=current_role(),
            current_user_id=current_user_id(),
            status=request.args.get("status"),
            user_id=to_int(user_id, "userId") if user_id else None,
        )
        return jsonify({"success": True, "leaves": [leave.to_dict() for leave in leaves]})

    @app.route("/api/leaves", methods=["POST"], endpoint="create_leave")
    @login_required
    def create_leave():
        data = json_body()
        leave = container.leave_service.create_leave(
            user_id=current_user_id(),
            leave_type=data.get("type", ""),
            start_date=_optional_date(data.get("startDate"), "startDate"),
            end_date=_optional_date(data.get("endDate"), "endDate"),
            reason=data.get("reason", ""),
        )
        return jsonify({"success": True, "message": "Leave request submitted successfully", "leave": leave.to_dict()}), 201

    @app.route("/api/leaves", methods=["PUT"], endpoint="decide_leave")
    @login_required
    def decide_leave():
        data = json_body()
        leave = container.leave_service.decide_leave(
            current_role=current_role(),
            admin_user_id=current_user_id(),
            leave_id=data.get("leaveId"),
            status=data.get("status", ""),
            admin_comments=data.get("adminComments", ""),
        )
        return jsonify({"success": True, "message": f"Leave request {leave.status.value} successfully", "leave": leave.to_dict()})
