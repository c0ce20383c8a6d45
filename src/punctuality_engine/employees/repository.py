from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_active_admin_ids(self) -> Sequence[int]:
        """Ids of active ``admin`` and ``super_admin`` users."""

        raise NotImplementedError

    def add_late_minutes(self, user_id: int, minutes: int) -> None:
        """Atomically increment the accumulated late minutes."""

        raise NotImplementedError
