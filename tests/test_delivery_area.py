"""Tests for delivery-area gating and quote composition."""

from __future__ import annotations

import httpx
import pytest

from src.domain.distance import distance_between
from src.domain.entities import Coordinate, DeliveryFeeConfig, HubLocation
from src.domain.enums import ServiceLine
from src.infrastructure.routing import OsrmRouter
from src.services.delivery_area import LOCATION_NOT_FOUND, is_within_area
from src.services.quotes import DeliveryQuoter
from src.services.road_distance import RoadDistanceEstimator
from tests.conftest import HUB, NEARBY, FakeGeocoder, mock_client, unreachable

FOOD = DeliveryFeeConfig(base_fee=60.0, per_km_fee=13.0, base_distance_km=0.0)


class TestIsWithinArea:
    @pytest.mark.asyncio
    async def test_not_found_is_distinct_from_too_far(self):
        check = await is_within_area(FakeGeocoder(), "nowhere", HUB, 100.0)
        assert check.within is False
        assert check.error == LOCATION_NOT_FOUND
        assert check.distance_km is None

    @pytest.mark.asyncio
    async def test_inside_radius(self):
        geocoder = FakeGeocoder({"Mabini Street": NEARBY})
        check = await is_within_area(geocoder, "Mabini Street", HUB, 100.0)
        assert check.within is True
        assert check.error is None
        assert check.distance_km == 1.4

    @pytest.mark.asyncio
    async def test_outside_radius(self):
        geocoder = FakeGeocoder({"Baguio": Coordinate(16.4023, 120.5960)})
        check = await is_within_area(geocoder, "Baguio", HUB, 100.0)
        assert check.within is False
        assert check.error is None
        assert check.distance_km > 100

    @pytest.mark.asyncio
    async def test_uses_straight_line_not_road_estimate(self):
        """Straight line is inside the radius even though x1.2 would not be."""
        target = NEARBY
        straight = distance_between(HUB, target)
        radius = straight + 0.05
        assert straight * 1.2 > radius

        geocoder = FakeGeocoder({"edge": target})
        check = await is_within_area(geocoder, "edge", HUB, radius)
        assert check.within is True

    @pytest.mark.asyncio
    async def test_area_check_independent_of_fee_surcharge(self):
        """Fee charges a surcharge while the address is still inside the area."""
        geocoder = FakeGeocoder({"Mabini Street": NEARBY})
        check = await is_within_area(geocoder, "Mabini Street", HUB, 1.5)
        assert check.within is True

        async with mock_client(unreachable) as client:
            quoter = DeliveryQuoter(
                geocoder,
                RoadDistanceEstimator(OsrmRouter(client)),
                HubLocation(HUB, "hub"),
            )
            quote = await quoter.quote(ServiceLine.FOOD, FOOD, dropoff="Mabini Street")
        assert quote.distance.distance_km > 1.5
        assert quote.fee > FOOD.base_fee


class TestDeliveryQuoter:
    def make_quoter(self, geocoder, client) -> DeliveryQuoter:
        return DeliveryQuoter(
            geocoder,
            RoadDistanceEstimator(OsrmRouter(client)),
            HubLocation(HUB, "Floridablanca Municipal Hall"),
        )

    @pytest.mark.asyncio
    async def test_end_to_end_from_hub_with_routing_down(self):
        geocoder = FakeGeocoder({"Mabini Street": Coordinate(14.9800, 120.5400)})
        async with mock_client(unreachable) as client:
            quote = await self.make_quoter(geocoder, client).quote(
                ServiceLine.FOOD, FOOD, dropoff="Mabini Street"
            )
        assert quote.pickup == HUB
        assert quote.distance.distance_km == 1.7
        assert quote.fee == 73.0
        assert quote.base_fee_applied is False

    @pytest.mark.asyncio
    async def test_between_two_addresses_uses_routing(self):
        payload = {"code": "Ok", "routes": [{"distance": 8400.0, "duration": 900.0}]}
        geocoder = FakeGeocoder({"Pickup": HUB, "Dropoff": NEARBY})
        parcel = DeliveryFeeConfig(base_fee=60.0, per_km_fee=13.0, base_distance_km=3.0)
        async with mock_client(lambda r: httpx.Response(200, json=payload)) as client:
            quote = await self.make_quoter(geocoder, client).quote(
                ServiceLine.PARCEL, parcel, dropoff="Dropoff", pickup="Pickup"
            )
        assert quote.distance.distance_km == 8.4
        assert quote.distance.duration_label == "15 mins"
        assert quote.fee == 60.0 + 5 * 13.0

    @pytest.mark.asyncio
    async def test_map_point_skips_geocoding(self):
        geocoder = FakeGeocoder()
        async with mock_client(unreachable) as client:
            quote = await self.make_quoter(geocoder, client).quote(
                ServiceLine.FOOD, FOOD, dropoff=NEARBY
            )
        assert geocoder.queries == []
        assert quote.dropoff == NEARBY

    @pytest.mark.asyncio
    async def test_unknown_address_charges_base_fee(self):
        geocoder = FakeGeocoder({"Pickup": HUB})
        async with mock_client(unreachable) as client:
            quote = await self.make_quoter(geocoder, client).quote(
                ServiceLine.ERRAND, FOOD, dropoff="???", pickup="Pickup"
            )
        assert quote.distance is None
        assert quote.fee == FOOD.base_fee
        assert quote.base_fee_applied is True
        assert quote.not_found == ("dropoff",)

    @pytest.mark.asyncio
    async def test_both_ends_missing(self):
        async with mock_client(unreachable) as client:
            quote = await self.make_quoter(FakeGeocoder(), client).quote(
                ServiceLine.PARCEL, FOOD, dropoff="a", pickup="b"
            )
        assert quote.not_found == ("pickup", "dropoff")
