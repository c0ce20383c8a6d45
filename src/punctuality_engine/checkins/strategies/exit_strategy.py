from __future__ import annotations

from typing import Optional

from ...common.datetime_utils import minute_of_day
from ...core.constants import EARLY_EXIT_THRESHOLD_MINUTES
from ...core.enums import CheckInStatus
from ...schedules.model import ProductSchedule
from ..model import CheckInEvent, ClassificationResult
from .base import TimingStrategy


class ExitStrategy(TimingStrategy):
    """Early when leaving more than an hour before the scheduled exit.

    Leaving late is not penalized.
    """

    def classify(
        self,
        *,
        event: CheckInEvent,
        schedule: ProductSchedule,
        opener: Optional[CheckInEvent] = None,
    ) -> ClassificationResult:
        diff = minute_of_day(event.timestamp) - minute_of_day(schedule.exit_time)
        if diff < -EARLY_EXIT_THRESHOLD_MINUTES:
            return ClassificationResult(status=CheckInStatus.EARLY, minutes_early=abs(diff))
        return ClassificationResult(status=CheckInStatus.ON_TIME)
