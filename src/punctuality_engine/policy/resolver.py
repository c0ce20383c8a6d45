from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from typing import Any, Mapping, Optional

from ..core.constants import GLOBAL_POLICY_SCOPE
from .model import Policy
from .repository import PolicyRepository

logger = logging.getLogger(__name__)

_MISSING = object()


def _lookup(document: Optional[Mapping[str, Any]], path: tuple[str, ...]) -> Any:
    current: Any = document
    for key in path:
        if not isinstance(current, Mapping) or key not in current or current[key] is None:
            return _MISSING
        current = current[key]
    return current


def _merge(cls, path: tuple[str, ...], default, documents) -> Any:
    values = {}
    for f in fields(cls):
        fallback = getattr(default, f.name)
        key = path + (f.name,)
        if is_dataclass(fallback):
            values[f.name] = _merge(type(fallback), key, fallback, documents)
            continue
        value = fallback
        for document in documents:
            found = _lookup(document, key)
            if found is not _MISSING:
                value = found
                break
        values[f.name] = value
    return cls(**values)


def merge_policy(
    global_document: Optional[Mapping[str, Any]],
    product_document: Optional[Mapping[str, Any]] = None,
) -> Policy:
    """Field-level fallback: product value, else global value, else hard default."""

    return _merge(Policy, (), Policy(), (product_document, global_document))


class ConfigResolver:
    def __init__(self, policies: PolicyRepository):
        self._policies = policies

    def resolve(self, product_line: Optional[str] = None) -> Policy:
        override = None
        if product_line and product_line != GLOBAL_POLICY_SCOPE:
            override = self._policies.get(product_line)
        global_document = self._policies.get(GLOBAL_POLICY_SCOPE)
        if override is None and global_document is None:
            logger.debug("No policy documents for %s, using hard defaults", product_line or GLOBAL_POLICY_SCOPE)
        return merge_policy(global_document, override)
