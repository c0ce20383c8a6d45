from __future__ import annotations

from datetime import datetime

import pytest

from punctuality_engine.actions.engine import ActionEngine, requires_comment
from punctuality_engine.checkins.model import ClassificationResult
from punctuality_engine.core.enums import ActionType, CheckInStatus, CheckInType, NotificationType
from punctuality_engine.notifications.model import SlackDelivery
from punctuality_engine.policy.resolver import merge_policy

from fakes import InMemoryCheckIns, InMemoryEmployees, RecordingSink

NOW = datetime(2024, 3, 4, 8, 20)
SLACK_ON = {"slack_config": {"enabled": True, "webhook_url": "https://hooks.slack.test/T000/B000"}}


class Harness:
    def __init__(self, employees, sink=None):
        self.employees = InMemoryEmployees(employees)
        self.checkins = InMemoryCheckIns()
        self.sink = sink or RecordingSink()
        self.engine = ActionEngine(self.employees, self.checkins, self.sink, clock=lambda: NOW)

    def store(self, event, result):
        checkin_id = self.checkins.create(event.with_classification(result))
        return self.checkins.get_by_id(checkin_id)

    def apply(self, event, result, employee, policy=None):
        stored = self.store(event, result)
        return stored, self.engine.apply(stored, result, employee, policy or merge_policy(None))


@pytest.fixture
def harness(promoter, admin):
    return Harness([promoter, admin])


def _types(actions):
    return [a.action_type for a in actions]


LATE_20 = ClassificationResult(status=CheckInStatus.LATE, minutes_late=20)


def test_late_entry_runs_full_cascade(harness, promoter, make_event):
    stored, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, promoter)

    assert _types(actions) == [
        ActionType.ASSIGN_STATUS,
        ActionType.ADD_LATE_MINUTES,
        ActionType.REQUIRE_COMMENT,
        ActionType.NOTIFY_USER,
        ActionType.NOTIFY_SUPERVISOR,
        ActionType.NOTIFY_ADMIN,
    ]
    assert all(a.success for a in actions)
    assert harness.employees.get_by_id(10).total_late_minutes == 20
    assert harness.checkins.get_by_id(stored.checkin_id).requires_comment is True


def test_actions_are_appended_to_the_checkin(harness, promoter, make_event):
    stored, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, promoter)
    recorded = harness.checkins.get_by_id(stored.checkin_id).actions_taken
    assert [a["type"] for a in recorded] == [a.action_type.value for a in actions]
    assert recorded[1]["details"] == {"minutes_added": 20}


def test_notification_texts_per_audience(harness, promoter, make_event):
    harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, promoter)
    user, supervisor, admins = harness.sink.sent

    assert user.recipient_ids == [10]
    assert user.title == "Late check-in - Entry"
    assert "20 minute(s) late at Disensa Centro" in user.message
    assert "comment is required" in user.message
    assert supervisor.recipient_ids == [2]
    assert supervisor.title.startswith("[Supervisor] ")
    assert "Ana Lopez" in supervisor.message
    assert admins.recipient_ids == [1]
    assert admins.title.startswith("[Admin] ")
    assert {n.notification_type for n in harness.sink.sent} == {NotificationType.LATE_ARRIVAL}


def test_on_time_checkin_only_records_status(harness, promoter, make_event):
    _, actions = harness.apply(
        make_event(CheckInType.ENTRY, NOW), ClassificationResult(status=CheckInStatus.ON_TIME), promoter
    )
    assert _types(actions) == [ActionType.ASSIGN_STATUS]
    assert actions[0].details == {"status": "on_time"}
    assert harness.sink.sent == []


def test_late_lunch_return_accumulates_minutes(harness, promoter, make_event):
    result = ClassificationResult(status=CheckInStatus.LATE, minutes_late=10)
    harness.apply(make_event(CheckInType.LUNCH_RETURN, NOW), result, promoter)
    assert harness.employees.get_by_id(10).total_late_minutes == 10
    assert harness.sink.sent[0].notification_type == NotificationType.LONG_LUNCH


def test_invalid_location_does_not_accumulate(harness, promoter, make_event):
    result = ClassificationResult(status=CheckInStatus.INVALID_LOCATION, minutes_late=20)
    _, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), result, promoter)
    assert ActionType.ADD_LATE_MINUTES not in _types(actions)
    assert ActionType.REQUIRE_COMMENT not in _types(actions)
    assert harness.sink.sent[0].notification_type == NotificationType.LOCATION_VIOLATION


def test_early_exit_requires_comment_but_is_not_notified_by_default(harness, promoter, make_event):
    result = ClassificationResult(status=CheckInStatus.EARLY, minutes_early=90)
    _, actions = harness.apply(make_event(CheckInType.EXIT, NOW), result, promoter)
    assert _types(actions) == [ActionType.ASSIGN_STATUS, ActionType.REQUIRE_COMMENT]

    policy = merge_policy({"notification_rules": {"notify_on_early_departure": True}})
    _, actions = harness.apply(make_event(CheckInType.EXIT, NOW), result, promoter, policy)
    assert ActionType.NOTIFY_USER in _types(actions)


def test_early_entry_is_neither_flagged_nor_notified(harness, promoter, make_event):
    result = ClassificationResult(status=CheckInStatus.EARLY, minutes_early=35)
    _, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), result, promoter)
    assert _types(actions) == [ActionType.ASSIGN_STATUS]


def test_existing_comment_of_minimum_length_skips_requirement(make_event):
    policy = merge_policy(None)
    late = make_event(CheckInType.ENTRY, NOW, status=CheckInStatus.LATE, minutes_late=20)

    assert requires_comment(late, policy)
    assert not requires_comment(make_event(CheckInType.ENTRY, NOW, status=CheckInStatus.LATE, notes="Traffic jam on the highway"), policy)
    assert requires_comment(make_event(CheckInType.ENTRY, NOW, status=CheckInStatus.LATE, notes="bus"), policy)


def test_comment_rules_can_be_disabled(make_event):
    policy = merge_policy({"comment_rules": {"require_on_late_arrival": False}})
    assert not requires_comment(make_event(CheckInType.ENTRY, NOW, status=CheckInStatus.LATE), policy)


def test_missing_supervisor_is_skipped(harness, promoter, make_event):
    from dataclasses import replace

    loner = replace(promoter, supervisor_id=None, supervisor_name=None)
    _, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, loner)
    assert ActionType.NOTIFY_SUPERVISOR not in _types(actions)
    assert all(a.success for a in actions)


def test_no_admins_is_a_recorded_failure(promoter, make_event):
    harness = Harness([promoter])
    _, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, promoter)
    admin_action = next(a for a in actions if a.action_type == ActionType.NOTIFY_ADMIN)
    assert not admin_action.success
    assert "administrators" in admin_action.error


def test_recipient_flags_are_respected(harness, promoter, make_event):
    policy = merge_policy({"notification_rules": {"notify_user": False, "notify_admin": False}})
    _, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, promoter, policy)
    assert [a for a in _types(actions) if a.value.startswith("notify")] == [ActionType.NOTIFY_SUPERVISOR]


def test_notification_failures_do_not_abort_cascade(promoter, admin, make_event):
    harness = Harness([promoter, admin], sink=RecordingSink(fail_notify=True))
    _, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, promoter, merge_policy(SLACK_ON))

    notify = [a for a in actions if a.action_type in (ActionType.NOTIFY_USER, ActionType.NOTIFY_SUPERVISOR, ActionType.NOTIFY_ADMIN)]
    assert len(notify) == 3
    assert not any(a.success for a in notify)
    slack = next(a for a in actions if a.action_type == ActionType.NOTIFY_SLACK)
    assert slack.success
    assert harness.employees.get_by_id(10).total_late_minutes == 20


def test_accumulator_failure_is_recorded(harness, promoter, make_event):
    def boom(user_id, minutes):
        raise ConnectionError("store down")

    harness.employees.add_late_minutes = boom
    _, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, promoter)
    accumulate = next(a for a in actions if a.action_type == ActionType.ADD_LATE_MINUTES)
    assert not accumulate.success
    assert accumulate.error == "store down"
    assert ActionType.NOTIFY_USER in _types(actions)


def test_slack_message_is_posted(harness, promoter, make_event):
    harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, promoter, merge_policy(SLACK_ON))
    ((url, message),) = harness.sink.slack_messages
    assert url == "https://hooks.slack.test/T000/B000"
    assert message["attachments"][0]["color"] == "#e01e5a"


def test_slack_without_webhook_is_a_recorded_failure(harness, promoter, make_event):
    policy = merge_policy({"slack_config": {"enabled": True}})
    _, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, promoter, policy)
    slack = next(a for a in actions if a.action_type == ActionType.NOTIFY_SLACK)
    assert not slack.success
    assert "webhook" in slack.error
    assert harness.sink.slack_messages == []


def test_slack_http_error_is_a_recorded_failure(promoter, admin, make_event):
    sink = RecordingSink(slack_delivery=SlackDelivery(ok=False, status_code=404, error="Slack returned 404"))
    harness = Harness([promoter, admin], sink=sink)
    _, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, promoter, merge_policy(SLACK_ON))
    slack = next(a for a in actions if a.action_type == ActionType.NOTIFY_SLACK)
    assert not slack.success
    assert slack.error == "Slack returned 404"


def test_slack_routing_flag_per_event(harness, promoter, make_event):
    policy = merge_policy({**SLACK_ON, "slack_config": {**SLACK_ON["slack_config"], "notify_on_long_lunch": False}})
    result = ClassificationResult(status=CheckInStatus.LATE, minutes_late=10)
    _, actions = harness.apply(make_event(CheckInType.LUNCH_RETURN, NOW), result, promoter, policy)
    assert ActionType.NOTIFY_SLACK not in _types(actions)


def test_disabled_event_type_sends_nothing(harness, promoter, make_event):
    policy = merge_policy({"notification_rules": {"notify_on_late_arrival": False}, **SLACK_ON})
    _, actions = harness.apply(make_event(CheckInType.ENTRY, NOW), LATE_20, promoter, policy)
    assert not [a for a in actions if a.action_type.value.startswith("notify")]
    assert harness.sink.sent == [] and harness.sink.slack_messages == []
