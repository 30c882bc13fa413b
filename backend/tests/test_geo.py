#!/usr/bin/env python3

from __future__ import annotations

import pytest

from backend.app.services.events.geo import distance_miles

POINTS = [
    (37.7749, -122.4194),  # San Francisco
    (34.0522, -118.2437),  # Los Angeles
    (40.7128, -74.0060),  # New York
    (-33.8688, 151.2093),  # Sydney
    (0.0, 0.0),
]


def test_known_distance() -> None:
    assert distance_miles(*POINTS[0], *POINTS[1]) == pytest.approx(347, abs=3)


def test_same_point_is_zero() -> None:
    assert distance_miles(37.52, -122.2758, 37.52, -122.2758) == 0


def test_distance_is_symmetric() -> None:
    for a in POINTS:
        for b in POINTS:
            assert distance_miles(*a, *b) == pytest.approx(distance_miles(*b, *a))


def test_antipodal_points_do_not_fail() -> None:
    assert distance_miles(0.0, 0.0, 0.0, 180.0) == pytest.approx(3959 * 3.141592653589793)
