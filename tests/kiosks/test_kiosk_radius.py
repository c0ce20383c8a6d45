from __future__ import annotations

import pytest

from punctuality_engine.kiosks.model import Kiosk, distance_meters


def test_distance_of_one_thousandth_degree_latitude():
    assert distance_meters(19.4326, -99.1332, 19.4336, -99.1332) == pytest.approx(111.2, abs=0.5)
    assert distance_meters(19.4326, -99.1332, 19.4326, -99.1332) == 0


def test_allowed_radius_prefers_override():
    kiosk = Kiosk("K-01", "Disensa Centro", "Disensa", 19.4326, -99.1332)
    assert kiosk.allowed_radius(150) == 150
    assert Kiosk("K-02", "BA Norte", "BA", 0, 0, radius_override_meters=400).allowed_radius(150) == 400
