"""Tests for haversine distance and listing visibility."""
import math
from types import SimpleNamespace

import pytest

from services.geo import distance_km
from services.visibility import farmer_search_area, sort_by_distance, visible_listings

FARMER = (3.1390, 101.6869)


def _spot(name, lat, lon):
    return SimpleNamespace(name=name, latitude=lat, longitude=lon)


@pytest.mark.parametrize("point", [(0.0, 0.0), (3.139, 101.6869), (-33.87, 151.21), (89.9, -179.9)])
def test_distance_to_self_is_zero(point):
    assert distance_km(*point, *point) == 0


@pytest.mark.parametrize("a,b", [
    ((3.139, 101.6869), (3.15, 101.7)),
    ((51.5074, -0.1278), (40.7128, -74.006)),
    ((-33.87, 151.21), (35.68, 139.69)),
])
def test_distance_is_symmetric(a, b):
    assert distance_km(*a, *b) == pytest.approx(distance_km(*b, *a))


def test_known_distances():
    assert distance_km(*FARMER, 3.1500, 101.7000) == pytest.approx(1.9, abs=0.3)
    assert distance_km(*FARMER, 3.3000, 101.9000) == pytest.approx(29.6, abs=1.0)
    # One degree of latitude on the 6371 km sphere.
    assert distance_km(0, 0, 1, 0) == pytest.approx(111.19, abs=0.01)


def test_nan_propagates():
    assert math.isnan(distance_km(float("nan"), 0, 0, 0))


def test_farmer_sees_only_listings_inside_radius():
    near = _spot("near", 3.1500, 101.7000)
    far = _spot("far", 3.3000, 101.9000)

    visible = visible_listings([near, far], FARMER, 10)

    assert visible == [near]


def test_visibility_matches_distance_rule_exactly():
    spots = [_spot(f"s{i}", 3.1390 + i * 0.02, 101.6869 + i * 0.015) for i in range(12)]
    radius = 12.5

    visible = visible_listings(spots, FARMER, radius)

    expected = [s for s in spots if distance_km(*FARMER, s.latitude, s.longitude) <= radius]
    assert visible == expected
    assert 0 < len(visible) < len(spots)


def test_missing_location_or_radius_shows_everything():
    spots = [_spot("a", 3.15, 101.70), _spot("b", 10.0, 100.0)]

    assert visible_listings(spots, None, 10) == spots
    assert visible_listings(spots, FARMER, None) == spots


def test_sort_by_distance_nearest_first():
    far = _spot("far", 3.25, 101.80)
    near = _spot("near", 3.14, 101.69)

    ranked = sort_by_distance([far, near], FARMER)

    assert [s.name for s, _ in ranked] == ["near", "far"]
    assert ranked[0][1] < ranked[1][1]


def test_search_area_defaults_radius_to_ten_km():
    profile = SimpleNamespace(latitude=3.139, longitude=101.6869, search_radius_km=None)
    assert farmer_search_area(profile) == ((3.139, 101.6869), 10)


def test_search_area_without_location_is_open():
    profile = SimpleNamespace(latitude=None, longitude=None, search_radius_km=5)
    assert farmer_search_area(profile) == (None, None)
    assert farmer_search_area(None) == (None, None)
