"""Punctuality action cascade.

Runs after a check-in has been classified and stored:

1. record the assigned status
2. add late minutes to the employee's accumulator
3. flag the check-in as requiring an explanatory comment
4. notify the user, the supervisor, the admins and Slack

Each step is best effort. A failing step becomes a failed
``PunctualityAction`` and the remaining steps still run.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Optional

from ..checkins.model import CheckInEvent, ClassificationResult
from ..checkins.repository import CheckInRepository
from ..common.datetime_utils import now_local
from ..core.enums import ActionType, Audience, CheckInStatus, CheckInType, NotificationType
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..issues.model import AttendanceIssue
from ..notifications.messages import (
    build_absence_content,
    build_absence_slack_message,
    build_notification_content,
    build_slack_message,
    notification_type_for,
)
from ..notifications.sink import NotificationSink
from ..policy.model import NotificationRules, Policy, SlackConfig
from .model import PunctualityAction

logger = logging.getLogger(__name__)

ACCUMULATING_TYPES = (CheckInType.ENTRY, CheckInType.LUNCH_RETURN)


def requires_comment(event: CheckInEvent, policy: Policy) -> bool:
    rules = policy.comment_rules
    if event.notes and len(event.notes.strip()) >= rules.min_comment_length:
        return False

    if event.status == CheckInStatus.LATE:
        if event.checkin_type == CheckInType.ENTRY:
            return rules.require_on_late_arrival
        if event.checkin_type == CheckInType.LUNCH_RETURN:
            return rules.require_on_long_lunch
    if event.status == CheckInStatus.EARLY and event.checkin_type == CheckInType.EXIT:
        return rules.require_on_early_departure
    return False


def should_notify(notification_type: NotificationType, rules: NotificationRules) -> bool:
    return {
        NotificationType.LATE_ARRIVAL: rules.notify_on_late_arrival,
        NotificationType.LONG_LUNCH: rules.notify_on_long_lunch,
        NotificationType.EARLY_DEPARTURE: rules.notify_on_early_departure,
        NotificationType.LOCATION_VIOLATION: rules.notify_on_invalid_location,
        NotificationType.ABSENCE: rules.notify_on_absence,
    }[notification_type]


def should_notify_slack(notification_type: NotificationType, slack: SlackConfig) -> bool:
    return {
        NotificationType.LATE_ARRIVAL: slack.notify_on_late_arrival,
        NotificationType.LONG_LUNCH: slack.notify_on_long_lunch,
        NotificationType.EARLY_DEPARTURE: False,
        NotificationType.LOCATION_VIOLATION: False,
        NotificationType.ABSENCE: slack.notify_on_absence,
    }[notification_type]


class ActionEngine:
    def __init__(
        self,
        employees: EmployeeRepository,
        checkins: CheckInRepository,
        sink: NotificationSink,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._checkins = checkins
        self._sink = sink
        self._clock = clock

    def apply(
        self,
        event: CheckInEvent,
        classification: ClassificationResult,
        employee: Employee,
        policy: Policy,
    ) -> list[PunctualityAction]:
        event = event.with_classification(classification)
        actions = [self._action(ActionType.ASSIGN_STATUS, details={"status": classification.status.value})]

        if (
            classification.status == CheckInStatus.LATE
            and event.checkin_type in ACCUMULATING_TYPES
            and classification.minutes_late > 0
        ):
            minutes = classification.minutes_late
            actions.append(
                self._run(
                    ActionType.ADD_LATE_MINUTES,
                    lambda: self._employees.add_late_minutes(employee.user_id, minutes),
                    details={"minutes_added": minutes},
                )
            )

        if requires_comment(event, policy):
            action = self._run(ActionType.REQUIRE_COMMENT, lambda: self._flag_comment(event), details={"comment_required": True})
            actions.append(action)
            if action.success:
                event = replace(event, requires_comment=True)

        notification_type = notification_type_for(event)
        if notification_type is None:
            pass
        elif not should_notify(notification_type, policy.notification_rules):
            logger.info("Notifications disabled for %s", notification_type.value)
        else:
            actions.extend(
                self._fan_out(
                    notification_type=notification_type,
                    employee=employee,
                    policy=policy,
                    source_id=event.checkin_id,
                    content=lambda audience: build_notification_content(event, employee, audience),
                    slack_message=lambda: build_slack_message(event, employee, policy.severe_delay_threshold),
                )
            )

        self._record(event, actions)
        return actions

    def notify_absence(self, issue: AttendanceIssue, employee: Employee, policy: Policy) -> list[PunctualityAction]:
        if not should_notify(NotificationType.ABSENCE, policy.notification_rules):
            return []
        return self._fan_out(
            notification_type=NotificationType.ABSENCE,
            employee=employee,
            policy=policy,
            source_id=issue.issue_id,
            content=lambda audience: build_absence_content(issue, employee, audience),
            slack_message=lambda: build_absence_slack_message(issue, employee),
        )

    def _fan_out(
        self,
        *,
        notification_type: NotificationType,
        employee: Employee,
        policy: Policy,
        source_id: Optional[int],
        content: Callable[[Audience], tuple[str, str]],
        slack_message: Callable[[], dict[str, Any]],
    ) -> list[PunctualityAction]:
        rules = policy.notification_rules
        actions: list[PunctualityAction] = []

        def send(recipient_ids: list[int], audience: Audience) -> dict[str, Any]:
            title, message = content(audience)
            notification_id = self._sink.notify(
                recipient_ids=recipient_ids,
                title=title,
                message=message,
                source_id=source_id,
                notification_type=notification_type,
                user_id=employee.user_id,
            )
            return {"notification_id": notification_id, "recipients": len(recipient_ids)}

        if rules.notify_user:
            actions.append(self._run(ActionType.NOTIFY_USER, lambda: send([employee.user_id], Audience.USER)))

        if rules.notify_supervisor and employee.supervisor_id is not None:
            actions.append(
                self._run(ActionType.NOTIFY_SUPERVISOR, lambda: send([employee.supervisor_id], Audience.SUPERVISOR))
            )

        if rules.notify_admin:
            actions.append(self._run(ActionType.NOTIFY_ADMIN, lambda: self._notify_admins(send)))

        slack = policy.slack_config
        if slack.enabled and should_notify_slack(notification_type, slack):
            actions.append(self._run(ActionType.NOTIFY_SLACK, lambda: self._post_slack(slack, slack_message())))

        return actions

    def _notify_admins(self, send: Callable[[list[int], Audience], dict[str, Any]]) -> dict[str, Any]:
        admin_ids = list(self._employees.list_active_admin_ids())
        if not admin_ids:
            raise LookupError("No active administrators")
        return send(admin_ids, Audience.ADMIN)

    def _post_slack(self, slack: SlackConfig, message: dict[str, Any]) -> dict[str, Any]:
        if not slack.webhook_url:
            raise LookupError("Slack webhook URL is not configured")
        delivery = self._sink.post_slack_message(slack.webhook_url, message)
        if not delivery.ok:
            raise RuntimeError(delivery.error or f"Slack returned {delivery.status_code}")
        return {"status_code": delivery.status_code}

    def _flag_comment(self, event: CheckInEvent) -> None:
        if event.checkin_id is not None:
            self._checkins.set_requires_comment(event.checkin_id, True)

    def _record(self, event: CheckInEvent, actions: list[PunctualityAction]) -> None:
        if event.checkin_id is None:
            return
        try:
            self._checkins.append_actions(event.checkin_id, [a.to_dict() for a in actions])
        except Exception:
            logger.exception("Could not store actions on check-in %s", event.checkin_id)

    def _action(self, action_type: ActionType, *, details: Optional[dict[str, Any]] = None) -> PunctualityAction:
        return PunctualityAction(action_type=action_type, executed_at=self._clock(), success=True, details=details or {})

    def _run(
        self,
        action_type: ActionType,
        step: Callable[[], Any],
        *,
        details: Optional[dict[str, Any]] = None,
    ) -> PunctualityAction:
        details = dict(details or {})
        try:
            result = step()
        except Exception as e:
            logger.warning("Action %s failed: %s", action_type.value, e)
            return PunctualityAction(
                action_type=action_type,
                executed_at=self._clock(),
                success=False,
                error=str(e),
                details=details,
            )
        if isinstance(result, dict):
            details.update(result)
        return PunctualityAction(action_type=action_type, executed_at=self._clock(), success=True, details=details)
