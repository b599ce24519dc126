"""Unit tests for haversine distance and the straight-line road estimate."""

import pytest

from src.domain.distance import (
    distance_between,
    haversine_km,
    round_km,
    straight_line_estimate,
)
from src.domain.entities import Coordinate, InvalidCoordinate
from tests.conftest import HUB, NEARBY


class TestHaversine:
    def test_same_point_is_zero(self):
        assert haversine_km(14.97, 120.52, 14.97, 120.52) == 0.0

    def test_known_distance(self):
        # Floridablanca hub -> point north-east of the poblacion (~1.4 km)
        d = distance_between(HUB, NEARBY)
        assert 1.3 < d < 1.5

    def test_symmetric(self):
        d1 = haversine_km(14.0, 120.0, 15.0, 121.0)
        d2 = haversine_km(15.0, 121.0, 14.0, 120.0)
        assert abs(d1 - d2) < 1e-6

    def test_antipodal_points_do_not_fail(self):
        d = haversine_km(0.0, 0.0, 0.0, 180.0)
        assert 20_000 < d < 20_040


class TestStraightLineEstimate:
    def test_applies_indirection_factor(self):
        result = straight_line_estimate(HUB, NEARBY)
        assert result.distance_km == round(distance_between(HUB, NEARBY) * 1.2, 1)
        assert result.duration_label is None

    def test_identical_points_are_zero(self):
        assert straight_line_estimate(HUB, HUB).distance_km == 0.0

    def test_round_km_one_decimal_and_non_negative(self):
        assert round_km(1.68) == 1.7
        assert round_km(-0.04) == 0.0


class TestCoordinate:
    @pytest.mark.parametrize("lat,lng", [(91, 0), (-91, 0), (0, 181), (0, -180.5)])
    def test_out_of_range_rejected(self, lat, lng):
        with pytest.raises(InvalidCoordinate):
            Coordinate(lat, lng)

    def test_nan_rejected(self):
        with pytest.raises(InvalidCoordinate):
            Coordinate(float("nan"), 0.0)

    def test_bounds_are_inclusive(self):
        Coordinate(90, 180)
        Coordinate(-90, -180)
