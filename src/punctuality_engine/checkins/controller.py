from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import current_user_id, login_required
from ..container import Container
from ..core.enums import CheckInType
from ..core.exceptions import ValidationError
from .model import CheckInEvent, GeoPoint


def _serialize(event: CheckInEvent) -> dict:
    return {
        "checkin_id": event.checkin_id,
        "user_id": event.user_id,
        "kiosk_id": event.kiosk_id,
        "product_line": event.product_line,
        "type": event.checkin_type.value,
        "timestamp": event.timestamp.isoformat(),
        "status": event.status.value if event.status else None,
        "minutes_late": event.minutes_late,
        "minutes_early": event.minutes_early,
        "requires_comment": event.requires_comment,
        "notes": event.notes,
        "actions_taken": list(event.actions_taken),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/checkins", methods=["POST"], endpoint="api_record_checkin")
    @login_required
    def record_checkin():
        data = request.get_json(silent=True) or {}
        try:
            checkin_type = CheckInType(data.get("type", ""))
        except ValueError:
            raise ValidationError("Unknown check-in type")

        kiosk_id = str(data.get("kiosk_id") or "").strip()
        if not kiosk_id:
            raise ValidationError("Kiosk is required")

        location = None
        if data.get("latitude") is not None and data.get("longitude") is not None:
            try:
                location = GeoPoint(
                    latitude=float(data["latitude"]),
                    longitude=float(data["longitude"]),
                    accuracy=data.get("accuracy"),
                )
            except (TypeError, ValueError):
                raise ValidationError("Coordinates must be numbers")

        # the service fills product line and kiosk name and checks the location
        event = CheckInEvent(
            user_id=current_user_id(),
            kiosk_id=kiosk_id,
            product_line="",
            checkin_type=checkin_type,
            timestamp=now_local(),
            location=location,
            notes=(data.get("notes") or None),
        )
        outcome = container.checkin_service.record(event)
        return jsonify({"success": True, "checkin": _serialize(outcome.event)}), 201

    @app.route("/api/checkins/<int:checkin_id>/comment", methods=["POST"], endpoint="api_checkin_comment")
    @login_required
    def add_comment(checkin_id: int):
        data = request.get_json(silent=True) or {}
        event = container.checkin_service.add_comment(
            checkin_id,
            data.get("comment", ""),
            user_id=current_user_id(),
        )
        return jsonify({"success": True, "checkin": _serialize(event)})
