from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Employee as seen by the engine.

    ``product_line`` and the assigned kiosk are read-only inputs to
    classification; ``total_late_minutes`` only grows, via the action engine.
    """

    user_id: int
    full_name: str
    role: Role
    email: Optional[str] = None
    is_active: bool = True
    product_line: Optional[str] = None
    assigned_kiosk_id: Optional[str] = None
    assigned_kiosk_name: Optional[str] = None
    supervisor_id: Optional[int] = None
    supervisor_name: Optional[str] = None
    total_late_minutes: int = 0
