from __future__ import annotations

import logging
import math
from typing import Optional

from ...core.enums import CheckInStatus
from ...schedules.model import ProductSchedule
from ..model import CheckInEvent, ClassificationResult
from .base import TimingStrategy

logger = logging.getLogger(__name__)


class LunchReturnStrategy(TimingStrategy):
    """Late when the lunch lasted longer than the scheduled duration."""

    def classify(
        self,
        *,
        event: CheckInEvent,
        schedule: ProductSchedule,
        opener: Optional[CheckInEvent] = None,
    ) -> ClassificationResult:
        if opener is None:
            logger.warning(
                "No lunch_out paired with lunch_return of user %s at %s; classified on time",
                event.user_id,
                event.timestamp.isoformat(),
            )
            return ClassificationResult(status=CheckInStatus.ON_TIME, note="pairing_unavailable")

        # halves round up
        actual_minutes = math.floor((event.timestamp - opener.timestamp).total_seconds() / 60 + 0.5)
        if actual_minutes > schedule.lunch_duration_minutes:
            return ClassificationResult(
                status=CheckInStatus.LATE,
                minutes_late=actual_minutes - schedule.lunch_duration_minutes,
            )
        return ClassificationResult(status=CheckInStatus.ON_TIME)
