from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...schedules.model import ProductSchedule
from ..model import CheckInEvent, ClassificationResult


class TimingStrategy(ABC):
    """Strategy Pattern: how one check-in type is judged against the schedule."""

    @abstractmethod
    def classify(
        self,
        *,
        event: CheckInEvent,
        schedule: ProductSchedule,
        opener: Optional[CheckInEvent] = None,
    ) -> ClassificationResult:
        raise NotImplementedError
