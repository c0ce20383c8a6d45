from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user_id, login_required
from ..container import Container
from .model import Notification


def _serialize(n: Notification) -> dict:
    return {
        "notification_id": n.notification_id,
        "type": n.notification_type.value,
        "title": n.title,
        "message": n.message,
        "user_id": n.user_id,
        "source_id": n.source_id,
        "is_read": n.is_read,
        "created_at": n.created_at.isoformat() if n.created_at else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="api_list_notifications")
    @login_required
    def list_notifications():
        limit = min(request.args.get("limit", default=50, type=int) or 50, 200)
        items = container.notifications_repo.list_for_recipient(current_user_id(), limit=limit)
        return jsonify({"success": True, "notifications": [_serialize(n) for n in items]})
