from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from punctuality_engine.actions.engine import ActionEngine
from punctuality_engine.checkins.model import GeoPoint
from punctuality_engine.checkins.service import CheckInService
from punctuality_engine.core.enums import ActionType, CheckInStatus, CheckInType, NotificationType
from punctuality_engine.core.exceptions import NotFoundError, ValidationError
from punctuality_engine.policy.resolver import ConfigResolver
from punctuality_engine.schedules.service import HolidayCalendar, ScheduleProvider

from fakes import (
    InMemoryCheckIns,
    InMemoryEmployees,
    InMemoryHolidays,
    InMemoryKiosks,
    InMemoryPolicies,
    InMemorySchedules,
    RecordingSink,
)

DAY = datetime(2024, 3, 4)


def at(hour: int, minute: int = 0) -> datetime:
    return DAY.replace(hour=hour, minute=minute)


@pytest.fixture
def kiosks(kiosk):
    return InMemoryKiosks([kiosk])


@pytest.fixture
def env(promoter, admin, kiosks):
    employees = InMemoryEmployees([promoter, admin])
    checkins = InMemoryCheckIns()
    sink = RecordingSink()
    policies = InMemoryPolicies()
    calendar = HolidayCalendar(InMemoryHolidays())
    service = CheckInService(
        checkins,
        employees,
        kiosks,
        ScheduleProvider(InMemorySchedules(), calendar),
        ConfigResolver(policies),
        ActionEngine(employees, checkins, sink, clock=lambda: at(12)),
    )
    return service, checkins, employees, sink, policies


def test_late_entry_is_classified_stored_and_acted_on(env, make_event):
    service, checkins, employees, sink, _ = env

    outcome = service.record(make_event(CheckInType.ENTRY, at(8, 12)))

    assert outcome.classification.status == CheckInStatus.LATE
    assert outcome.event.checkin_id is not None
    assert outcome.event.requires_comment is True
    stored = checkins.get_by_id(outcome.event.checkin_id)
    assert stored.status == CheckInStatus.LATE
    assert stored.minutes_late == 12
    assert stored.requires_comment is True
    assert len(stored.actions_taken) == len(outcome.actions)
    assert employees.get_by_id(10).total_late_minutes == 12


def test_lunch_return_is_paired_with_stored_lunch_out(env, make_event):
    service, _, employees, _, _ = env
    service.record(make_event(CheckInType.ENTRY, at(8, 0)))
    service.record(make_event(CheckInType.LUNCH_OUT, at(14, 0)))

    outcome = service.record(make_event(CheckInType.LUNCH_RETURN, at(15, 10)))

    assert outcome.classification.status == CheckInStatus.LATE
    assert outcome.classification.minutes_late == 10
    assert employees.get_by_id(10).total_late_minutes == 10


def test_lunch_return_without_lunch_out_is_on_time(env, make_event):
    service, *_ = env
    outcome = service.record(make_event(CheckInType.LUNCH_RETURN, at(15, 10)))
    assert outcome.classification.status == CheckInStatus.ON_TIME
    assert [a.action_type for a in outcome.actions] == [ActionType.ASSIGN_STATUS]


def test_invalid_location_is_persisted(env, make_event):
    service, checkins, _, sink, _ = env
    # about 220 m north of the kiosk, default radius is 150 m
    far = GeoPoint(latitude=19.4346, longitude=-99.1332)
    outcome = service.record(make_event(CheckInType.ENTRY, at(8, 0), location=far))
    assert checkins.get_by_id(outcome.event.checkin_id).status == CheckInStatus.INVALID_LOCATION
    assert NotificationType.LOCATION_VIOLATION in {n.notification_type for n in sink.sent}


def test_missing_location_is_invalid(env, make_event):
    service, *_ = env
    outcome = service.record(make_event(CheckInType.ENTRY, at(8, 0), location=None))
    assert outcome.classification.status == CheckInStatus.INVALID_LOCATION


def test_location_within_radius_is_valid(env, make_event):
    service, *_ = env
    # about 110 m from the kiosk
    near = GeoPoint(latitude=19.4336, longitude=-99.1332)
    assert service.record(make_event(CheckInType.ENTRY, at(8, 0), location=near)).classification.is_on_time


def test_radius_comes_from_kiosk_override_then_policy(env, make_event, kiosk, kiosks):
    service, _, _, _, policies = env
    far = GeoPoint(latitude=19.4346, longitude=-99.1332)

    policies.documents["Disensa"] = {"default_radius_meters": 300}
    assert service.record(make_event(CheckInType.ENTRY, at(8, 0), location=far)).classification.is_on_time

    kiosks.by_id["K-01"] = replace(kiosk, radius_override_meters=100)
    outcome = service.record(make_event(CheckInType.ENTRY, at(8, 1), location=far))
    assert outcome.classification.status == CheckInStatus.INVALID_LOCATION


def test_unknown_or_inactive_kiosk(env, make_event, kiosk, kiosks):
    service, *_ = env
    with pytest.raises(NotFoundError):
        service.record(replace(make_event(CheckInType.ENTRY, at(8, 0)), kiosk_id="K-99"))

    kiosks.by_id["K-01"] = replace(kiosk, is_active=False)
    with pytest.raises(ValidationError):
        service.record(make_event(CheckInType.ENTRY, at(8, 0)))


def test_product_line_comes_from_employee_assignment(env, make_event):
    service, *_ = env
    # Casa_Marchand starts at 09:00, Disensa at 08:00
    outcome = service.record(make_event(CheckInType.ENTRY, at(8, 30), product_line="Casa_Marchand"))
    assert outcome.event.product_line == "Disensa"
    assert outcome.classification.status == CheckInStatus.LATE


def test_unknown_or_inactive_employee(env, make_event, promoter):
    service, _, employees, _, _ = env
    with pytest.raises(NotFoundError):
        service.record(make_event(CheckInType.ENTRY, at(8, 0), user_id=999))

    employees.by_id[10] = replace(promoter, is_active=False)
    with pytest.raises(ValidationError):
        service.record(make_event(CheckInType.ENTRY, at(8, 0)))


def test_store_failure_fails_the_call(env, make_event):
    service, checkins, *_ = env

    def broken(event):
        raise ConnectionError("store down")

    checkins.create = broken
    with pytest.raises(ConnectionError):
        service.record(make_event(CheckInType.ENTRY, at(8, 12)))


def test_comment_clears_requirement(env, make_event):
    service, checkins, *_ = env
    outcome = service.record(make_event(CheckInType.ENTRY, at(8, 12)))

    updated = service.add_comment(outcome.event.checkin_id, "  Traffic accident on the highway  ", user_id=10)

    assert updated.notes == "Traffic accident on the highway"
    assert updated.requires_comment is False
    assert checkins.get_by_id(outcome.event.checkin_id).requires_comment is False


def test_comment_must_meet_minimum_length(env, make_event):
    service, _, _, _, policies = env
    outcome = service.record(make_event(CheckInType.ENTRY, at(8, 12)))

    with pytest.raises(ValidationError):
        service.add_comment(outcome.event.checkin_id, "late")

    policies.documents["Disensa"] = {"comment_rules": {"min_comment_length": 3}}
    assert service.add_comment(outcome.event.checkin_id, "late").notes == "late"


def test_comment_on_someone_elses_checkin(env, make_event):
    service, *_ = env
    outcome = service.record(make_event(CheckInType.ENTRY, at(8, 12)))
    with pytest.raises(ValidationError):
        service.add_comment(outcome.event.checkin_id, "Traffic accident on the highway", user_id=11)
    with pytest.raises(NotFoundError):
        service.add_comment(404, "Traffic accident on the highway")
