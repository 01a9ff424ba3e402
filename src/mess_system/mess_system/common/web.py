from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Any, Mapping

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    PersistenceError,
    TerminalStateError,
    ValidationError,
)
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

# Never sent to clients.
HIDDEN_FIELDS = frozenset({"password_hash"})


def to_payload(value: Any) -> Any:
    """Turn domain objects into JSON-safe structures (money as strings)."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_payload(getattr(value, f.name)) for f in dataclasses.fields(value) if f.name not in HIDDEN_FIELDS}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {to_payload(k): to_payload(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value) if isinstance(value, (set, frozenset)) else value
        return [to_payload(v) for v in items]
    return value


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object body")
    return data


def date_arg(value: Any, field_name: str = "date") -> date:
    if not value:
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")


def current_user_id() -> str:
    return session["user_id"]


def current_tenant_id() -> str:
    return session["tenant_id"]


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError("Please log in to continue.")
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError("Please log in to continue.")
        if session.get("role") != Role.ADMIN.value:
            raise AuthorizationError("Admin access required.")
        return view(*args, **kwargs)

    return wrapper


def staff_required(view):
    """Admins and cooks."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError("Please log in to continue.")
        if session.get("role") not in {Role.ADMIN.value, Role.COOK.value}:
            raise AuthorizationError("Staff access required.")
        return view(*args, **kwargs)

    return wrapper


def super_admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            raise AuthenticationError("Please log in to continue.")
        if session.get("role") != Role.ADMIN.value or not session.get("is_super_admin"):
            raise AuthorizationError("Super admin access required.")
        return view(*args, **kwargs)

    return wrapper


def _status_for(e: DomainError) -> int:
    if isinstance(e, AuthenticationError):
        return 401
    if isinstance(e, AuthorizationError):
        return 403
    if isinstance(e, NotFoundError):
        return 404
    if isinstance(e, TerminalStateError):
        return 409
    if isinstance(e, ValidationError):
        return 400
    return 500


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = _status_for(e)
        if isinstance(e, PersistenceError):
            # Already logged with traceback by the store; the change itself is committed.
            return jsonify({"success": False, "message": str(e), "committed": True}), 500
        logger.warning("%s %s rejected (%s): %s", request.method, request.path, type(e).__name__, e)
        return jsonify({"success": False, "message": str(e)}), status

    @app.errorhandler(404)
    def handle_not_found(e):
        return jsonify({"success": False, "message": "Not found"}), 404

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return jsonify({"success": False, "message": "Method not allowed"}), 405
