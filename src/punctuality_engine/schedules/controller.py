from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_hhmm, parse_hhmm, parse_iso_date
from ..common.web import admin_required, current_role, login_required
from ..container import Container
from ..core.exceptions import ValidationError
from .model import Holiday, ProductSchedule


def _schedule_dict(s: ProductSchedule) -> dict:
    return {
        "product_line": s.product_line,
        "work_days": sorted(s.work_days),
        "entry_time": format_hhmm(s.entry_time),
        "exit_time": format_hhmm(s.exit_time),
        "lunch_start_time": format_hhmm(s.lunch_start_time),
        "lunch_duration_minutes": s.lunch_duration_minutes,
        "tolerance_minutes": s.tolerance_minutes,
        "works_on_holidays": s.works_on_holidays,
    }


def _holiday_dict(h: Holiday) -> dict:
    return {
        "holiday_id": h.holiday_id,
        "name": h.name,
        "date": h.holiday_date.isoformat(),
        "kind": h.kind,
        "product_lines": sorted(h.product_lines) if h.product_lines else None,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedules/<product_line>", methods=["GET"], endpoint="api_get_schedule")
    @login_required
    def get_schedule(product_line: str):
        schedule = container.schedule_provider.resolve(product_line)
        return jsonify({"success": True, "schedule": _schedule_dict(schedule)})

    @app.route("/api/schedules/<product_line>", methods=["PUT"], endpoint="api_save_schedule")
    @admin_required
    def save_schedule(product_line: str):
        data = request.get_json(silent=True) or {}
        try:
            schedule = ProductSchedule(
                product_line=product_line,
                work_days=frozenset(int(d) for d in data["work_days"]),
                entry_time=parse_hhmm(data["entry_time"]),
                exit_time=parse_hhmm(data["exit_time"]),
                lunch_start_time=parse_hhmm(data["lunch_start_time"]),
                lunch_duration_minutes=int(data["lunch_duration_minutes"]),
                tolerance_minutes=int(data.get("tolerance_minutes", 5)),
                works_on_holidays=bool(data.get("works_on_holidays", False)),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid schedule: {e}")

        container.schedule_provider.save(current_role=current_role(), schedule=schedule)
        return jsonify({"success": True, "schedule": _schedule_dict(schedule)})

    @app.route("/api/holidays", methods=["GET"], endpoint="api_list_holidays")
    @login_required
    def list_holidays():
        year = request.args.get("year", type=int)
        if year is None:
            raise ValidationError("Year is required")
        holidays = container.holiday_calendar.list_year(year)
        return jsonify({"success": True, "holidays": [_holiday_dict(h) for h in holidays]})

    @app.route("/api/holidays", methods=["POST"], endpoint="api_add_holiday")
    @admin_required
    def add_holiday():
        data = request.get_json(silent=True) or {}
        try:
            holiday_date = parse_iso_date(data.get("date", ""))
        except ValueError:
            raise ValidationError("Holiday date must use YYYY-MM-DD")
        holiday_id = container.holiday_calendar.add(
            current_role=current_role(),
            name=data.get("name", ""),
            holiday_date=holiday_date,
            kind=data.get("kind", "official"),
            product_lines=data.get("product_lines"),
        )
        return jsonify({"success": True, "holiday_id": holiday_id}), 201

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="api_delete_holiday")
    @admin_required
    def delete_holiday(holiday_id: int):
        container.holiday_calendar.delete(current_role=current_role(), holiday_id=holiday_id)
        return jsonify({"success": True})
