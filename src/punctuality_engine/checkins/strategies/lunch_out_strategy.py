from __future__ import annotations

from typing import Optional

from ...core.enums import CheckInStatus
from ...schedules.model import ProductSchedule
from ..model import CheckInEvent, ClassificationResult
from .base import TimingStrategy


class LunchOutStrategy(TimingStrategy):
    """Leaving for lunch only opens the lunch window; never tardy."""

    def classify(
        self,
        *,
        event: CheckInEvent,
        schedule: ProductSchedule,
        opener: Optional[CheckInEvent] = None,
    ) -> ClassificationResult:
        return ClassificationResult(status=CheckInStatus.ON_TIME)
