from __future__ import annotations

from datetime import date, datetime

import pytest

from punctuality_engine.core.enums import IssueType, Role
from punctuality_engine.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from punctuality_engine.issues.model import AttendanceIssue
from punctuality_engine.issues.service import IssueService

from fakes import InMemoryIssues

RESOLVED_AT = datetime(2024, 3, 4, 16, 0)


def _issue(user_id=10, issue_type=IssueType.NO_ENTRY, day=date(2024, 3, 4), product_line="Disensa"):
    return AttendanceIssue(
        user_id=user_id,
        issue_type=issue_type,
        issue_date=day,
        expected_time=datetime.combine(day, datetime.min.time()).replace(hour=8),
        detected_at=datetime.combine(day, datetime.min.time()).replace(hour=9, minute=30),
        minutes_overdue=30,
        product_line=product_line,
    )


@pytest.fixture
def repo():
    issues = InMemoryIssues()
    issues.create_if_absent(_issue())
    issues.create_if_absent(_issue(user_id=11, product_line="BA"))
    issues.create_if_absent(_issue(issue_type=IssueType.NO_EXIT, day=date(2024, 3, 5)))
    return issues


def test_create_if_absent_suppresses_duplicates(repo):
    assert repo.create_if_absent(_issue()) is None


def test_list_filters(repo):
    service = IssueService(repo)
    assert len(service.list(current_role=Role.ADMIN)) == 3
    assert len(service.list(current_role=Role.ADMIN, issue_date=date(2024, 3, 4))) == 2
    assert [i.user_id for i in service.list(current_role=Role.SUPERVISOR, product_line="BA")] == [11]
    assert [i.issue_type for i in service.list(current_role=Role.ADMIN, user_id=10, issue_type=IssueType.NO_EXIT)] == [
        IssueType.NO_EXIT
    ]


def test_promoters_cannot_list_issues(repo):
    with pytest.raises(AuthorizationError):
        IssueService(repo).list(current_role=Role.PROMOTER)


def test_resolve(repo):
    service = IssueService(repo, clock=lambda: RESOLVED_AT)
    resolved = service.resolve(current_role=Role.ADMIN, issue_id=1, resolved_by="Admin", resolution="Medical leave")

    assert resolved.resolved
    assert resolved.resolved_at == RESOLVED_AT
    assert repo.get_by_id(1).resolution == "Medical leave"
    assert service.list(current_role=Role.ADMIN, resolved=False, user_id=10, issue_date=date(2024, 3, 4)) == []


def test_resolve_is_terminal(repo):
    service = IssueService(repo)
    service.resolve(current_role=Role.ADMIN, issue_id=1, resolved_by="Admin", resolution="Medical leave")
    with pytest.raises(ValidationError):
        service.resolve(current_role=Role.ADMIN, issue_id=1, resolved_by="Admin", resolution="Again")


def test_resolve_errors(repo):
    service = IssueService(repo)
    with pytest.raises(AuthorizationError):
        service.resolve(current_role=Role.SUPERVISOR, issue_id=1, resolved_by="Sup", resolution="ok")
    with pytest.raises(ValidationError):
        service.resolve(current_role=Role.ADMIN, issue_id=1, resolved_by="Admin", resolution="  ")
    with pytest.raises(NotFoundError):
        service.resolve(current_role=Role.ADMIN, issue_id=99, resolved_by="Admin", resolution="ok")


def test_store_errors_surface_on_resolve(repo):
    def broken(*args, **kwargs):
        raise ConnectionError("store down")

    repo.resolve = broken
    with pytest.raises(ConnectionError):
        IssueService(repo).resolve(current_role=Role.ADMIN, issue_id=1, resolved_by="Admin", resolution="ok")


def test_resolved_key_is_not_inserted_again(repo):
    repo.resolve(1, resolved_by="Admin", resolution="ok", resolved_at=RESOLVED_AT)
    assert repo.create_if_absent(_issue()) is None
