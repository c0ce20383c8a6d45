from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

from ..core.constants import GLOBAL_POLICY_SCOPE
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import Policy
from .repository import PolicyRepository

logger = logging.getLogger(__name__)

# (path, low, high, label)
_RANGES = (
    (("severe_delay_threshold",), 5, 120, "Severe delay threshold"),
    (("default_radius_meters",), 50, 1000, "Default radius"),
    (("absence_rules", "no_entry_after_minutes"), 0, 480, "Entry absence time"),
    (("absence_rules", "no_exit_after_minutes"), 0, 480, "Exit absence time"),
    (("auto_close_rules", "close_after_minutes"), 0, 240, "Auto close time"),
    (("lunch_rules", "max_duration_minutes"), 30, 180, "Max lunch duration"),
    (("comment_rules", "min_comment_length"), 0, 500, "Minimum comment length"),
)


@dataclass
class PolicyValidation:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _get(document: Mapping[str, Any], path: tuple[str, ...]) -> Any:
    current: Any = document
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def validate_policy_document(document: Mapping[str, Any]) -> PolicyValidation:
    result = PolicyValidation()

    for path, low, high, label in _RANGES:
        value = _get(document, path)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            result.errors.append(f"{label} must be a whole number")
        elif value < low or value > high:
            result.errors.append(f"{label} must be between {low} and {high} minutes")

    no_entry = _get(document, ("absence_rules", "no_entry_after_minutes"))
    if isinstance(no_entry, int) and no_entry > 120:
        result.warnings.append("Entry grace period is very high (>2 hours)")

    lunch = _get(document, ("lunch_rules", "max_duration_minutes"))
    if isinstance(lunch, int) and lunch > 120:
        result.warnings.append("Max lunch time is very high (>2 hours)")

    close_after = _get(document, ("auto_close_rules", "close_after_minutes"))
    no_exit = _get(document, ("absence_rules", "no_exit_after_minutes"))
    if isinstance(close_after, int) and isinstance(no_exit, int) and close_after < no_exit:
        result.warnings.append("Auto close happens before exit absence detection")

    webhook = _get(document, ("slack_config", "webhook_url"))
    if webhook and not str(webhook).startswith("https://"):
        result.errors.append("Slack webhook URL must use https")

    return result


class PolicyService:
    """Admin-facing updates of policy documents."""

    def __init__(self, policies: PolicyRepository):
        self._policies = policies

    def update(
        self,
        *,
        current_role: Role,
        document: Mapping[str, Any],
        product_line: Optional[str] = None,
        updated_by: str = "system",
    ) -> PolicyValidation:
        if not current_role.is_admin:
            raise AuthorizationError("Only administrators can change the configuration")

        validation = validate_policy_document(document)
        if not validation.is_valid:
            raise ValidationError("Invalid configuration: " + ", ".join(validation.errors))
        if validation.warnings:
            logger.warning("Configuration warnings for %s: %s", product_line or GLOBAL_POLICY_SCOPE, validation.warnings)

        self._policies.save(product_line or GLOBAL_POLICY_SCOPE, dict(document), updated_by=updated_by)
        return validation

    def reset_to_defaults(self, *, current_role: Role, product_line: Optional[str] = None) -> None:
        if not current_role.is_admin:
            raise AuthorizationError("Only administrators can change the configuration")
        self._policies.replace(product_line or GLOBAL_POLICY_SCOPE, asdict(Policy()), updated_by="system_reset")
