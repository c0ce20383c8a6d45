from __future__ import annotations

from datetime import date, datetime

import pytest

from punctuality_engine.core.enums import Audience, CheckInStatus, CheckInType, IssueType, NotificationType, Severity
from punctuality_engine.issues.model import AttendanceIssue
from punctuality_engine.notifications.messages import (
    build_absence_content,
    build_absence_slack_message,
    build_notification_content,
    build_slack_message,
    notification_type_for,
    severity_for,
)

NOW = datetime(2024, 3, 4, 8, 25)


@pytest.mark.parametrize(
    "minutes, tier",
    [(20, Severity.SEVERE), (45, Severity.SEVERE), (19, Severity.MODERATE), (11, Severity.MODERATE), (10, Severity.MILD), (6, Severity.MILD)],
)
def test_severity_tiers(minutes, tier):
    assert severity_for(minutes, 20) == tier


def test_notification_type_per_event(make_event):
    late = dict(status=CheckInStatus.LATE, minutes_late=5)
    assert notification_type_for(make_event(CheckInType.ENTRY, NOW, **late)) == NotificationType.LATE_ARRIVAL
    assert notification_type_for(make_event(CheckInType.LUNCH_RETURN, NOW, **late)) == NotificationType.LONG_LUNCH
    assert notification_type_for(make_event(CheckInType.EXIT, NOW, status=CheckInStatus.EARLY)) == NotificationType.EARLY_DEPARTURE
    assert notification_type_for(make_event(CheckInType.ENTRY, NOW, status=CheckInStatus.EARLY)) is None
    assert notification_type_for(make_event(CheckInType.ENTRY, NOW, status=CheckInStatus.ON_TIME)) is None
    assert (
        notification_type_for(make_event(CheckInType.LUNCH_OUT, NOW, status=CheckInStatus.INVALID_LOCATION))
        == NotificationType.LOCATION_VIOLATION
    )


def test_early_exit_content(make_event, promoter):
    event = make_event(CheckInType.EXIT, NOW, status=CheckInStatus.EARLY, minutes_early=90)
    title, message = build_notification_content(event, promoter, Audience.ADMIN)
    assert title == "[Admin] Ana Lopez - Early exit"
    assert "90 minute(s) early" in message


def test_slack_message_for_moderate_delay(make_event, promoter):
    event = make_event(CheckInType.ENTRY, NOW, status=CheckInStatus.LATE, minutes_late=15, checkin_id=7)
    message = build_slack_message(event, promoter, 20)

    assert message["attachments"][0]["color"] == "#ECB22E"
    assert message["blocks"][0]["type"] == "header"
    assert message["blocks"][-1]["type"] == "context"
    assert "Check-in #7" in message["blocks"][-1]["elements"][0]["text"]
    field_texts = [f["text"] for f in message["blocks"][1]["fields"]]
    assert any("Luis Perez" in t for t in field_texts)
    assert any("15 min total" in t for t in field_texts)


def test_slack_message_shows_comment_or_requirement(make_event, promoter):
    commented = make_event(CheckInType.ENTRY, NOW, status=CheckInStatus.LATE, minutes_late=5, notes="Metro stopped for 20 minutes")
    texts = [b.get("text", {}).get("text", "") for b in build_slack_message(commented, promoter, 20)["blocks"]]
    assert any("Metro stopped" in t for t in texts)

    pending = make_event(CheckInType.ENTRY, NOW, status=CheckInStatus.LATE, minutes_late=5, requires_comment=True)
    texts = [b.get("text", {}).get("text", "") for b in build_slack_message(pending, promoter, 20)["blocks"]]
    assert any("comment is required" in t for t in texts)


def test_absence_content(promoter):
    issue = AttendanceIssue(
        user_id=10,
        issue_type=IssueType.NO_ENTRY,
        issue_date=date(2024, 3, 4),
        expected_time=datetime(2024, 3, 4, 8, 0),
        detected_at=datetime(2024, 3, 4, 9, 30),
        minutes_overdue=30,
    )
    title, message = build_absence_content(issue, promoter)
    assert title == "No entry recorded"
    assert "expected by 08:00" in message

    title, message = build_absence_content(issue, promoter, Audience.SUPERVISOR)
    assert title == "[Supervisor] Ana Lopez - No entry recorded"
    assert "30 minute(s)" in message

    slack = build_absence_slack_message(issue, promoter)
    assert slack["attachments"][0]["color"] == "#e01e5a"
