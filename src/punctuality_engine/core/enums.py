from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Employee roles used for authorization and notification routing."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    PROMOTER = "promotor"

    @property
    def is_admin(self) -> bool:
        return self in (Role.ADMIN, Role.SUPER_ADMIN)


class CheckInType(str, Enum):
    ENTRY = "entry"
    LUNCH_OUT = "lunch_out"
    LUNCH_RETURN = "lunch_return"
    EXIT = "exit"

    @property
    def label(self) -> str:
        return {
            CheckInType.ENTRY: "Entry",
            CheckInType.LUNCH_OUT: "Lunch",
            CheckInType.LUNCH_RETURN: "Lunch return",
            CheckInType.EXIT: "Exit",
        }[self]


class CheckInStatus(str, Enum):
    """Status persisted on a classified check-in."""

    ON_TIME = "on_time"
    LATE = "late"
    EARLY = "early"
    INVALID_LOCATION = "invalid_location"


class IssueType(str, Enum):
    NO_ENTRY = "no_entry"
    NO_EXIT = "no_exit"
    LATE_LUNCH_RETURN = "late_lunch_return"
    AUTO_CLOSED = "auto_closed"

    @property
    def label(self) -> str:
        return {
            IssueType.NO_ENTRY: "No entry recorded",
            IssueType.NO_EXIT: "No exit recorded",
            IssueType.LATE_LUNCH_RETURN: "No return from lunch",
            IssueType.AUTO_CLOSED: "Day auto-closed",
        }[self]


class NotificationType(str, Enum):
    LATE_ARRIVAL = "late_arrival"
    LONG_LUNCH = "long_lunch"
    EARLY_DEPARTURE = "early_departure"
    LOCATION_VIOLATION = "location_violation"
    ABSENCE = "absence"


class ActionType(str, Enum):
    ASSIGN_STATUS = "assign_status"
    ADD_LATE_MINUTES = "add_late_minutes"
    REQUIRE_COMMENT = "require_comment"
    NOTIFY_USER = "notify_user"
    NOTIFY_SUPERVISOR = "notify_supervisor"
    NOTIFY_ADMIN = "notify_admin"
    NOTIFY_SLACK = "notify_slack"


class Severity(str, Enum):
    """Slack styling tier for a late event."""

    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class SessionKind(str, Enum):
    """Opening/closing pair reconstructed from a day's check-ins."""

    WORK = "work"
    LUNCH = "lunch"


class Audience(str, Enum):
    """Who a notification text is written for."""

    USER = "user"
    SUPERVISOR = "supervisor"
    ADMIN = "admin"
