from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol


class PolicyRepository(Protocol):
    """Key-value store of partial policy documents keyed by ``"global"`` or a product line."""

    def get(self, scope: str) -> Optional[Mapping[str, Any]]:
        raise NotImplementedError

    def save(self, scope: str, document: Mapping[str, Any], *, updated_by: str) -> None:
        """Merge ``document`` into the stored document of ``scope``."""

        raise NotImplementedError

    def replace(self, scope: str, document: Mapping[str, Any], *, updated_by: str) -> None:
        raise NotImplementedError
