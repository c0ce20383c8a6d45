"""Titles, messages and Slack payloads for punctuality notifications."""

from __future__ import annotations

from typing import Any, Optional

from ..checkins.model import CheckInEvent
from ..core.constants import MODERATE_DELAY_MINUTES, SLACK_BOT_NAME, SLACK_ICON_EMOJI
from ..core.enums import Audience, CheckInStatus, CheckInType, NotificationType, Severity
from ..employees.model import Employee
from ..issues.model import AttendanceIssue

SEVERITY_STYLE = {
    Severity.SEVERE: (":red_circle:", "#e01e5a"),
    Severity.MODERATE: (":large_yellow_circle:", "#ECB22E"),
    Severity.MILD: (":large_orange_circle:", "#f2c744"),
}
EARLY_STYLE = (":zap:", "#4A90E2")
ON_TIME_STYLE = (":round_pushpin:", "#36a64f")
INVALID_LOCATION_STYLE = (":warning:", "#9b59b6")
ABSENCE_STYLE = (":no_entry:", "#e01e5a")

_AUDIENCE_PREFIX = {
    Audience.USER: "",
    Audience.SUPERVISOR: "[Supervisor] ",
    Audience.ADMIN: "[Admin] ",
}


def severity_for(minutes_late: int, severe_threshold: int) -> Severity:
    if minutes_late >= severe_threshold:
        return Severity.SEVERE
    if minutes_late > MODERATE_DELAY_MINUTES:
        return Severity.MODERATE
    return Severity.MILD


def notification_type_for(event: CheckInEvent) -> Optional[NotificationType]:
    if event.status == CheckInStatus.LATE:
        if event.checkin_type == CheckInType.ENTRY:
            return NotificationType.LATE_ARRIVAL
        if event.checkin_type == CheckInType.LUNCH_RETURN:
            return NotificationType.LONG_LUNCH
    if event.status == CheckInStatus.EARLY and event.checkin_type == CheckInType.EXIT:
        return NotificationType.EARLY_DEPARTURE
    if event.status == CheckInStatus.INVALID_LOCATION:
        return NotificationType.LOCATION_VIOLATION
    return None


def build_notification_content(
    event: CheckInEvent,
    employee: Employee,
    audience: Audience = Audience.USER,
) -> tuple[str, str]:
    label = event.checkin_type.label
    kiosk = event.display_kiosk
    own = audience == Audience.USER

    if event.status == CheckInStatus.LATE:
        if own:
            title = f"Late check-in - {label}"
            message = f"Your {label.lower()} was recorded {event.minutes_late} minute(s) late at {kiosk}."
            if event.requires_comment:
                message += " An explanatory comment is required."
        else:
            title = f"{employee.full_name} - Late {label.lower()}"
            message = f"{employee.full_name} recorded {label.lower()} {event.minutes_late} minute(s) late at {kiosk}."
    elif event.status == CheckInStatus.EARLY:
        if own:
            title = f"Early {label.lower()}"
            message = f"Your {label.lower()} was recorded {event.minutes_early} minute(s) early at {kiosk}."
        else:
            title = f"{employee.full_name} - Early {label.lower()}"
            message = f"{employee.full_name} recorded {label.lower()} {event.minutes_early} minute(s) early at {kiosk}."
    elif event.status == CheckInStatus.INVALID_LOCATION:
        if own:
            title = f"{label} outside the allowed area"
            message = f"Your {label.lower()} at {kiosk} was recorded outside the allowed radius."
        else:
            title = f"{employee.full_name} - {label} outside the allowed area"
            message = f"{employee.full_name} recorded {label.lower()} at {kiosk} outside the allowed radius."
    else:
        title = f"{label} recorded"
        message = f"{label} recorded at {kiosk}."

    return _AUDIENCE_PREFIX[audience] + title, message


def build_absence_content(
    issue: AttendanceIssue,
    employee: Employee,
    audience: Audience = Audience.USER,
) -> tuple[str, str]:
    expected = issue.expected_time.strftime("%H:%M")
    if audience == Audience.USER:
        title = issue.issue_type.label
        message = f"{issue.issue_type.label} on {issue.issue_date.isoformat()} (expected by {expected})."
    else:
        title = f"{employee.full_name} - {issue.issue_type.label}"
        message = (
            f"{employee.full_name}: {issue.issue_type.label.lower()} on {issue.issue_date.isoformat()}, "
            f"{issue.minutes_overdue} minute(s) past {expected}."
        )
    return _AUDIENCE_PREFIX[audience] + title, message


def _field(label: str, value: str) -> dict[str, str]:
    return {"type": "mrkdwn", "text": f"*{label}:*\n{value}"}


def _envelope(text: str, header: str, color: str, blocks: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "username": SLACK_BOT_NAME,
        "icon_emoji": SLACK_ICON_EMOJI,
        "text": text,
        "blocks": [{"type": "header", "text": {"type": "plain_text", "text": header, "emoji": True}}] + blocks,
        "attachments": [{"color": color, "blocks": []}],
    }


def build_slack_message(event: CheckInEvent, employee: Employee, severe_threshold: int) -> dict[str, Any]:
    label = event.checkin_type.label
    if event.status == CheckInStatus.LATE:
        severity = severity_for(event.minutes_late, severe_threshold)
        emoji, color = SEVERITY_STYLE[severity]
        status_text = {
            Severity.SEVERE: f"SEVERE DELAY ({event.minutes_late} min)",
            Severity.MODERATE: f"Late ({event.minutes_late} min)",
            Severity.MILD: f"Slightly late ({event.minutes_late} min)",
        }[severity]
    elif event.status == CheckInStatus.EARLY:
        emoji, color = EARLY_STYLE
        status_text = f"Early ({event.minutes_early} min)"
    elif event.status == CheckInStatus.INVALID_LOCATION:
        emoji, color = INVALID_LOCATION_STYLE
        status_text = "Outside allowed area"
    else:
        emoji, color = ON_TIME_STYLE
        status_text = "On time"

    text = f"{emoji} *{employee.full_name}* - {label}"
    if event.status == CheckInStatus.LATE:
        text += f" {event.minutes_late} min late"

    employee_text = employee.full_name + (f"\n_{employee.email}_" if employee.email else "")
    fields = [
        _field("Employee", employee_text),
        _field("Location", event.display_kiosk),
        _field("Time", event.timestamp.strftime("%d %b %H:%M:%S")),
        _field("Status", status_text),
    ]
    if employee.supervisor_name:
        fields.append(_field("Supervisor", employee.supervisor_name))
    if event.product_line:
        fields.append(_field("Product", event.product_line))
    if event.status == CheckInStatus.LATE:
        total = employee.total_late_minutes + event.minutes_late
        fields.append(_field("Accumulated late minutes", f"{total} min total"))

    blocks: list[dict[str, Any]] = [{"type": "section", "fields": fields}]
    if event.notes:
        blocks.append({"type": "section", "text": {"type": "mrkdwn", "text": f'*Comment:*\n_"{event.notes}"_'}})
    elif event.requires_comment:
        blocks.append({"type": "section", "text": {"type": "mrkdwn", "text": "*An explanatory comment is required*"}})
    blocks.append({"type": "divider"})

    context = SLACK_BOT_NAME
    if event.checkin_id is not None:
        context += f" • Check-in #{event.checkin_id}"
    blocks.append({"type": "context", "elements": [{"type": "mrkdwn", "text": context}]})

    return _envelope(text, f"{emoji} {label} check-in", color, blocks)


def build_absence_slack_message(issue: AttendanceIssue, employee: Employee) -> dict[str, Any]:
    emoji, color = ABSENCE_STYLE
    fields = [
        _field("Employee", employee.full_name),
        _field("Issue", issue.issue_type.label),
        _field("Expected", issue.expected_time.strftime("%d %b %H:%M")),
        _field("Overdue", f"{issue.minutes_overdue} min"),
    ]
    if employee.assigned_kiosk_name:
        fields.append(_field("Location", employee.assigned_kiosk_name))
    if employee.supervisor_name:
        fields.append(_field("Supervisor", employee.supervisor_name))

    text = f"{emoji} *{employee.full_name}* - {issue.issue_type.label}"
    blocks: list[dict[str, Any]] = [{"type": "section", "fields": fields}, {"type": "divider"}]
    return _envelope(text, f"{emoji} {issue.issue_type.label}", color, blocks)
