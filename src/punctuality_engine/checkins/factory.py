from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..core.enums import CheckInStatus, CheckInType
from ..schedules.model import ProductSchedule
from .model import CheckInEvent, ClassificationResult
from .strategies.base import TimingStrategy
from .strategies.entry_strategy import EntryStrategy
from .strategies.exit_strategy import ExitStrategy
from .strategies.lunch_out_strategy import LunchOutStrategy
from .strategies.lunch_return_strategy import LunchReturnStrategy


@dataclass
class TimingStrategyFactory:
    """Factory Pattern: one strategy per check-in type."""

    def for_type(self, checkin_type: CheckInType) -> TimingStrategy:
        if checkin_type == CheckInType.ENTRY:
            return EntryStrategy()
        if checkin_type == CheckInType.LUNCH_OUT:
            return LunchOutStrategy()
        if checkin_type == CheckInType.LUNCH_RETURN:
            return LunchReturnStrategy()
        if checkin_type == CheckInType.EXIT:
            return ExitStrategy()
        raise ValueError(f"Unknown check-in type: {checkin_type!r}")


class TimingClassifier:
    """Classify one check-in against its product schedule.

    Pure: no store access. ``opener`` is the paired opening event for closing
    types (see ``sessions.find_opener``). An invalid location overrides the
    timing status but keeps the computed minutes.
    """

    def __init__(self, factory: Optional[TimingStrategyFactory] = None):
        self._factory = factory or TimingStrategyFactory()

    def classify(
        self,
        event: CheckInEvent,
        schedule: ProductSchedule,
        opener: Optional[CheckInEvent] = None,
        *,
        location_valid: bool = True,
    ) -> ClassificationResult:
        strategy = self._factory.for_type(event.checkin_type)
        result = strategy.classify(event=event, schedule=schedule, opener=opener)
        if not location_valid:
            return replace(result, status=CheckInStatus.INVALID_LOCATION)
        return result
