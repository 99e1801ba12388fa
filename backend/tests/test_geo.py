"""
Tests for the haversine distance helper.

Run: pytest tests/test_geo.py -v
"""

from __future__ import annotations

import pytest

from app.services.geo import distance_km


def test_identical_points_are_zero():
    assert distance_km(51.5074, -0.1278, 51.5074, -0.1278) == 0.0


def test_symmetric():
    a = (40.7128, -74.0060)
    b = (34.0522, -118.2437)
    assert distance_km(*a, *b) == distance_km(*b, *a)


@pytest.mark.parametrize("lat2,lon2", [(1.0, 0.0), (0.0, 1.0), (-1.0, 0.0)])
def test_one_degree_at_equator(lat2: float, lon2: float):
    assert distance_km(0.0, 0.0, lat2, lon2) == pytest.approx(111.19, abs=0.5)


def test_london_to_paris():
    assert distance_km(51.5074, -0.1278, 48.8566, 2.3522) == pytest.approx(343.5, abs=1.0)
