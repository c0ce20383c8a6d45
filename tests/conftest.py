from __future__ import annotations

from datetime import datetime

import pytest

from punctuality_engine.core.enums import CheckInType, Role
from punctuality_engine.checkins.model import CheckInEvent, GeoPoint
from punctuality_engine.employees.model import Employee
from punctuality_engine.kiosks.model import Kiosk

KIOSK_POINT = GeoPoint(latitude=19.4326, longitude=-99.1332)


@pytest.fixture
def fixed_now() -> datetime:
    # Monday
    return datetime(2024, 3, 4, 10, 0)


@pytest.fixture
def promoter() -> Employee:
    return Employee(
        user_id=10,
        full_name="Ana Lopez",
        role=Role.PROMOTER,
        product_line="Disensa",
        assigned_kiosk_id="K-01",
        assigned_kiosk_name="Disensa Centro",
        supervisor_id=2,
        supervisor_name="Luis Perez",
    )


@pytest.fixture
def kiosk() -> Kiosk:
    return Kiosk(
        kiosk_id="K-01",
        name="Disensa Centro",
        product_line="Disensa",
        latitude=KIOSK_POINT.latitude,
        longitude=KIOSK_POINT.longitude,
    )


@pytest.fixture
def admin() -> Employee:
    return Employee(user_id=1, full_name="Admin", role=Role.ADMIN)


@pytest.fixture
def make_event():
    def _make(checkin_type: CheckInType, at: datetime, *, user_id: int = 10, product_line: str = "Disensa", **kwargs):
        kwargs.setdefault("location", KIOSK_POINT)
        return CheckInEvent(
            user_id=user_id,
            kiosk_id="K-01",
            kiosk_name="Disensa Centro",
            product_line=product_line,
            checkin_type=checkin_type,
            timestamp=at,
            **kwargs,
        )

    return _make
