from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, ValidationError

_STATUS = {
    ValidationError: 400,
    AuthorizationError: 403,
    NotFoundError: 404,
}


def current_role() -> Role:
    return Role(session.get("role"))


def current_user_id() -> int:
    return int(session["user_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "role" not in session:
            return jsonify({"success": False, "message": "Authentication required"}), 401
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        if not current_role().is_admin:
            return jsonify({"success": False, "message": "Administrator role required"}), 403
        return view(*args, **kwargs)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    def handle_domain_error(e: DomainError):
        status = next((code for cls, code in _STATUS.items() if isinstance(e, cls)), 400)
        return jsonify({"success": False, "message": str(e)}), status

    app.register_error_handler(DomainError, handle_domain_error)
