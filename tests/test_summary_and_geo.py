from __future__ import annotations

import math

import pytest

from access_router.geo import EARTH_RADIUS_M, haversine_m
from access_router.route_scoring import accessibility_score
from access_router.summary import estimate_time_minutes, format_distance, speed_m_per_min


def test_haversine_matches_known_distances() -> None:
    assert haversine_m(55.0, 37.0, 55.0, 37.0) == 0.0
    one_degree = haversine_m(0.0, 0.0, 1.0, 0.0)
    assert one_degree == pytest.approx(math.pi * EARTH_RADIUS_M / 180.0)
    assert haversine_m(51.128, 71.4304, 51.1235, 71.435) == pytest.approx(
        haversine_m(51.1235, 71.435, 51.128, 71.4304)
    )


def test_haversine_propagates_nan() -> None:
    assert math.isnan(haversine_m(float("nan"), 37.0, 55.0, 37.0))


def test_time_estimate_uses_mobility_speed() -> None:
    assert estimate_time_minutes(400.0, "wheelchair") == 10
    assert estimate_time_minutes(401.0, "wheelchair") == 11
    assert estimate_time_minutes(120.0, "stroller") == 2
    assert estimate_time_minutes(90.0, "crutches") == 3
    assert estimate_time_minutes(100.0, "wheelchair_assisted") == 2
    assert estimate_time_minutes(100.0, "hoverboard") == 2
    assert estimate_time_minutes(0.0, "wheelchair") == 0
    assert speed_m_per_min("unknown") == 50.0


def test_format_distance_switches_to_kilometres() -> None:
    assert format_distance(0) == "0 m"
    assert format_distance(850.4) == "850 m"
    assert format_distance(999.7) == "1.0 km"
    assert format_distance(1234.0) == "1.2 km"


def test_accessibility_score_rounding() -> None:
    assert accessibility_score([]) == 100
    assert accessibility_score(["accessible", "partial"]) == 80
    assert accessibility_score(["accessible", "inaccessible"]) == 50
    assert accessibility_score(["accessible", "partial", "partial"]) == 73
    assert accessibility_score(["partial", "accessible", "accessible"]) == 87
