from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import CheckInType
from .model import CheckInEvent


class CheckInRepository(Protocol):
    def get_by_id(self, checkin_id: int) -> Optional[CheckInEvent]:
        raise NotImplementedError

    def list_for_user_and_date(self, user_id: int, work_date: date) -> Sequence[CheckInEvent]:
        """Check-ins of one calendar day, oldest first."""

        raise NotImplementedError

    def list_between(
        self,
        *,
        start: date,
        end: date,
        checkin_type: Optional[CheckInType] = None,
    ) -> Sequence[CheckInEvent]:
        raise NotImplementedError

    def create(self, event: CheckInEvent) -> int:
        raise NotImplementedError

    def set_requires_comment(self, checkin_id: int, required: bool) -> None:
        raise NotImplementedError

    def set_notes(self, checkin_id: int, *, notes: str, requires_comment: bool) -> None:
        raise NotImplementedError

    def append_actions(self, checkin_id: int, actions: Sequence[Mapping[str, Any]]) -> None:
        raise NotImplementedError
