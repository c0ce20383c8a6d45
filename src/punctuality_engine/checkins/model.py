from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import CheckInStatus, CheckInType


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class ClassificationResult:
    status: CheckInStatus
    minutes_late: int = 0
    minutes_early: int = 0
    note: Optional[str] = None

    @property
    def is_on_time(self) -> bool:
        return self.status == CheckInStatus.ON_TIME


@dataclass(frozen=True)
class CheckInEvent:
    """One check-in captured at a kiosk.

    Classification fields are filled once; afterwards only ``notes`` and
    ``requires_comment`` change.
    """

    user_id: int
    kiosk_id: str
    product_line: str
    checkin_type: CheckInType
    timestamp: datetime
    kiosk_name: Optional[str] = None
    location: Optional[GeoPoint] = None
    notes: Optional[str] = None
    checkin_id: Optional[int] = None
    status: Optional[CheckInStatus] = None
    minutes_late: int = 0
    minutes_early: int = 0
    requires_comment: bool = False
    actions_taken: tuple[dict[str, Any], ...] = ()

    @property
    def work_date(self) -> date:
        return self.timestamp.date()

    @property
    def display_kiosk(self) -> str:
        return self.kiosk_name or self.kiosk_id

    def with_classification(self, result: ClassificationResult) -> "CheckInEvent":
        return replace(
            self,
            status=result.status,
            minutes_late=result.minutes_late,
            minutes_early=result.minutes_early,
        )
