from __future__ import annotations

from typing import Optional

from ...common.datetime_utils import minute_of_day
from ...core.constants import EARLY_ENTRY_THRESHOLD_MINUTES
from ...core.enums import CheckInStatus
from ...schedules.model import ProductSchedule
from ..model import CheckInEvent, ClassificationResult
from .base import TimingStrategy


class EntryStrategy(TimingStrategy):
    """Late past tolerance, early when more than 30 minutes ahead."""

    def classify(
        self,
        *,
        event: CheckInEvent,
        schedule: ProductSchedule,
        opener: Optional[CheckInEvent] = None,
    ) -> ClassificationResult:
        diff = minute_of_day(event.timestamp) - minute_of_day(schedule.entry_time)
        if diff > schedule.tolerance_minutes:
            return ClassificationResult(status=CheckInStatus.LATE, minutes_late=diff)
        if diff < -EARLY_ENTRY_THRESHOLD_MINUTES:
            return ClassificationResult(status=CheckInStatus.EARLY, minutes_early=abs(diff))
        return ClassificationResult(status=CheckInStatus.ON_TIME)
