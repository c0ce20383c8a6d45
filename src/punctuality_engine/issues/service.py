from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_ISSUE_LIST_LIMIT
from ..core.enums import IssueType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import AttendanceIssue
from .repository import IssueRepository

logger = logging.getLogger(__name__)


class IssueService:
    """Admin-facing issue operations.

    Store errors are not caught here: a failed resolution must reach the caller.
    """

    def __init__(self, issues: IssueRepository, *, clock: Callable[[], datetime] = now_local):
        self._issues = issues
        self._clock = clock

    def list(
        self,
        *,
        current_role: Role,
        issue_date: Optional[date] = None,
        resolved: Optional[bool] = None,
        user_id: Optional[int] = None,
        product_line: Optional[str] = None,
        issue_type: Optional[IssueType] = None,
        limit: int = DEFAULT_ISSUE_LIST_LIMIT,
    ) -> Sequence[AttendanceIssue]:
        if current_role not in (Role.SUPER_ADMIN, Role.ADMIN, Role.SUPERVISOR):
            raise AuthorizationError("You are not allowed to view attendance issues")
        return self._issues.list(
            start=issue_date,
            end=issue_date,
            resolved=resolved,
            user_id=user_id,
            product_line=product_line,
            issue_type=issue_type,
            limit=limit,
        )

    def resolve(self, *, current_role: Role, issue_id: int, resolved_by: str, resolution: str) -> AttendanceIssue:
        if not current_role.is_admin:
            raise AuthorizationError("Only administrators can resolve attendance issues")
        resolved_by = require_non_empty(resolved_by, "Resolved by")
        resolution = require_non_empty(resolution, "Resolution")

        issue = self._issues.get_by_id(int(issue_id))
        if not issue:
            raise NotFoundError(f"Attendance issue {issue_id} does not exist")
        if issue.resolved:
            raise ValidationError("Attendance issue is already resolved")

        resolved_at = self._clock()
        if not self._issues.resolve(issue.issue_id, resolved_by=resolved_by, resolution=resolution, resolved_at=resolved_at):
            raise ValidationError("Attendance issue could not be resolved")

        logger.info("Issue %s resolved by %s", issue.issue_id, resolved_by)
        return replace(issue, resolved=True, resolved_by=resolved_by, resolved_at=resolved_at, resolution=resolution)
