from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class AbsenceRules:
    no_entry_after_minutes: int = 60
    no_exit_after_minutes: int = 120


@dataclass(frozen=True)
class AutoCloseRules:
    close_after_minutes: int = 60
    mark_as_absent: bool = True


@dataclass(frozen=True)
class LunchRules:
    max_duration_minutes: int = 60


@dataclass(frozen=True)
class NotificationRules:
    notify_on_absence: bool = True
    notify_on_late_arrival: bool = True
    notify_on_long_lunch: bool = True
    notify_on_early_departure: bool = False
    notify_on_invalid_location: bool = True
    notify_user: bool = True
    notify_supervisor: bool = True
    notify_admin: bool = True


@dataclass(frozen=True)
class CommentRules:
    require_on_late_arrival: bool = True
    require_on_long_lunch: bool = True
    require_on_early_departure: bool = True
    min_comment_length: int = 10


@dataclass(frozen=True)
class SlackConfig:
    enabled: bool = False
    webhook_url: Optional[str] = None
    notify_on_late_arrival: bool = True
    notify_on_long_lunch: bool = True
    notify_on_absence: bool = True


@dataclass(frozen=True)
class Policy:
    """Fully populated policy for one product line.

    Built only by ``merge_policy``; the dataclass defaults are the hard
    defaults used when neither the product nor the global document sets a
    field.
    """

    severe_delay_threshold: int = 20
    default_radius_meters: int = 150
    absence_rules: AbsenceRules = field(default_factory=AbsenceRules)
    auto_close_rules: AutoCloseRules = field(default_factory=AutoCloseRules)
    lunch_rules: LunchRules = field(default_factory=LunchRules)
    notification_rules: NotificationRules = field(default_factory=NotificationRules)
    comment_rules: CommentRules = field(default_factory=CommentRules)
    slack_config: SlackConfig = field(default_factory=SlackConfig)
