from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import ActionType


@dataclass(frozen=True)
class PunctualityAction:
    """Audit record of one side-effect of a classified check-in."""

    action_type: ActionType
    executed_at: datetime
    success: bool
    error: Optional[str] = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.action_type.value,
            "executed_at": self.executed_at.isoformat(),
            "success": self.success,
            "details": dict(self.details),
        }
        if self.error:
            data["error"] = self.error
        return data
