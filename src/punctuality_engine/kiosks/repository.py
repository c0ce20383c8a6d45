from __future__ import annotations

from typing import Optional, Protocol

from .model import Kiosk


class KioskRepository(Protocol):
    def get_by_id(self, kiosk_id: str) -> Optional[Kiosk]:
        raise NotImplementedError
