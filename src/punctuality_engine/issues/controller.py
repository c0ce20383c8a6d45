from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import admin_required, current_role, login_required
from ..container import Container
from ..core.enums import IssueType
from ..core.exceptions import ValidationError
from .model import AttendanceIssue


def _serialize(issue: AttendanceIssue) -> dict:
    return {
        "issue_id": issue.issue_id,
        "user_id": issue.user_id,
        "product_line": issue.product_line,
        "type": issue.issue_type.value,
        "date": issue.issue_date.isoformat(),
        "expected_time": issue.expected_time.strftime("%H:%M"),
        "detected_at": issue.detected_at.isoformat(),
        "minutes_overdue": issue.minutes_overdue,
        "resolved": issue.resolved,
        "resolved_by": issue.resolved_by,
        "resolved_at": issue.resolved_at.isoformat() if issue.resolved_at else None,
        "resolution": issue.resolution,
    }


def _optional_bool(value):
    if value is None or value == "":
        return None
    return value.lower() in ("1", "true", "yes")


def _parse_date(value):
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError("Dates must use YYYY-MM-DD")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/issues", methods=["GET"], endpoint="api_list_issues")
    @login_required
    def list_issues():
        args = request.args
        issue_type = None
        if args.get("type"):
            try:
                issue_type = IssueType(args["type"])
            except ValueError:
                raise ValidationError("Unknown issue type")

        issues = container.issue_service.list(
            current_role=current_role(),
            issue_date=_parse_date(args.get("date")),
            resolved=_optional_bool(args.get("resolved")),
            user_id=args.get("user_id", type=int),
            product_line=args.get("product_line") or None,
            issue_type=issue_type,
        )
        return jsonify({"success": True, "issues": [_serialize(i) for i in issues]})

    @app.route("/api/issues/<int:issue_id>/resolve", methods=["POST"], endpoint="api_resolve_issue")
    @admin_required
    def resolve_issue(issue_id: int):
        data = request.get_json(silent=True) or {}
        issue = container.issue_service.resolve(
            current_role=current_role(),
            issue_id=issue_id,
            resolved_by=str(session.get("name") or session["user_id"]),
            resolution=data.get("resolution", ""),
        )
        return jsonify({"success": True, "issue": _serialize(issue)})

    @app.route("/api/issues/sweep", methods=["POST"], endpoint="api_sweep_issues")
    @admin_required
    def sweep_issues():
        created = container.issue_detector.sweep(now_local())
        return jsonify({"success": True, "created": [_serialize(i) for i in created]})

    @app.route("/api/stats", methods=["GET"], endpoint="api_attendance_stats")
    @admin_required
    def attendance_stats():
        today = now_local().date()
        start = _parse_date(request.args.get("start")) or today
        end = _parse_date(request.args.get("end")) or today
        stats = container.stats_service.summarize(start, end)
        return jsonify({"success": True, "stats": stats.to_dict()})
