"""Helpers shared by the JSON controllers: auth decorators, errors, request parsing."""

from __future__ import annotations

import logging
from datetime import date
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

_STATUS_CODES = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
)


def error_response(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def status_for(error: DomainError) -> int:
    for kind, status in _STATUS_CODES:
        if isinstance(error, kind):
            return status
    if isinstance(error, ExternalServiceError):
        return error.status
    return 500


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        if status >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, error)
        return error_response(str(error), status)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return error_response(error.description or error.name, error.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if bool(app.config.get("DEBUG", False)):
            return error_response(f"Internal server error: {error}", 500)
        return error_response("Internal server error", 500)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Unauthorized", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return error_response("Unauthorized", 401)
        if session.get("role") != Role.ADMIN.value:
            return error_response("Admin access required", 403)
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def date_arg(name: str, default: Optional[date] = None) -> date:
    raw = request.args.get(name)
    if not raw:
        if default is None:
            raise ValidationError(f"Missing {name} parameter")
        return default
    return parse_iso_date(raw, name)


def to_int(value, name: str) -> int:
    """Integer from a query, form or JSON value; bad input is a 400."""
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {name} parameter")


def int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    return to_int(raw, name)
