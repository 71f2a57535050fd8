"""
Unit tests for the Advertisement Matching Engine: the two radius policies,
catalog failure handling, and the end-to-end recommendation pipeline.
"""

import threading
from unittest.mock import MagicMock

import pytest

from ridelytics.models import Coordinate
from ridelytics.services.catalogReader import CatalogUnavailableError, StaticCatalogReader
from ridelytics.services.matchingEngine import (
    CONVERSATION_RADIUS_CEILING_M,
    NO_ADS_MESSAGE,
    find_nearby_businesses,
    find_recommendations,
    load_active_catalog,
    match_ads_at,
)
from ridelytics.services.travelTimeEnricher import TravelTimeEnricher

SEATTLE = Coordinate(47.6062, -122.3321)


@pytest.fixture
def unavailable_reader():
    reader = MagicMock()
    reader.load_active.side_effect = CatalogUnavailableError("disk gone")
    return reader


class TestMatchAdsAt:
    def test_seattle_scenario(self, seattle_catalog):
        results = match_ads_at(SEATTLE, seattle_catalog)
        # Redmond is ~17.5 km away, outside its 8 km geofence
        assert [(r.record.id, r.distance_meters) for r in results] == [("a", 0)]

    def test_priority_beats_distance(self, make_record, point_north):
        catalog = [
            make_record("close-p2", location=point_north(SEATTLE, 100), priority=2, catalog_index=0),
            make_record("far-p1", location=point_north(SEATTLE, 3000), priority=1, catalog_index=1),
        ]
        assert [r.record.id for r in match_ads_at(SEATTLE, catalog)] == ["far-p1", "close-p2"]

    def test_distance_is_rounded_integer(self, make_record, point_north):
        catalog = [make_record("a", location=point_north(SEATTLE, 1234.4))]
        (result,) = match_ads_at(SEATTLE, catalog)
        assert result.distance_meters == 1234
        assert isinstance(result.distance_meters, int)


class TestLoadActiveCatalog:
    def test_unavailable_catalog_is_empty(self, unavailable_reader):
        assert load_active_catalog(unavailable_reader) == ()


class TestFindRecommendations:
    @pytest.mark.asyncio
    async def test_enriches_ranked_matches(self, seattle_catalog, make_routing):
        routing = make_routing(default=420)
        outcome = await find_recommendations(
            SEATTLE, StaticCatalogReader(seattle_catalog), TravelTimeEnricher(routing)
        )
        assert outcome.total == 1
        assert outcome.message is None
        assert outcome.matches[0].record.id == "a"
        assert outcome.matches[0].travel_duration_seconds == 420

    @pytest.mark.asyncio
    async def test_no_matches_has_message_and_skips_routing(self, make_record, fake_routing):
        catalog = [make_record("far", location=Coordinate(40.7128, -74.0060))]
        outcome = await find_recommendations(
            SEATTLE, StaticCatalogReader(catalog), TravelTimeEnricher(fake_routing)
        )
        assert outcome.matches == []
        assert outcome.message == NO_ADS_MESSAGE
        assert fake_routing.calls == []

    @pytest.mark.asyncio
    async def test_catalog_failure_degrades_to_no_matches(self, unavailable_reader, fake_routing):
        outcome = await find_recommendations(
            SEATTLE, unavailable_reader, TravelTimeEnricher(fake_routing)
        )
        assert outcome.total == 0
        assert outcome.message == NO_ADS_MESSAGE

    @pytest.mark.asyncio
    async def test_catalog_is_read_off_the_event_loop(self, seattle_catalog, fake_routing):
        loop_thread = threading.get_ident()
        reader_threads = []
        reader = MagicMock()

        def load_active():
            reader_threads.append(threading.get_ident())
            return tuple(seattle_catalog)

        reader.load_active.side_effect = load_active

        outcome = await find_recommendations(SEATTLE, reader, TravelTimeEnricher(fake_routing))

        assert outcome.total == 1
        assert reader_threads and reader_threads[0] != loop_thread

    @pytest.mark.asyncio
    async def test_all_routing_timeouts_keep_candidates(self, make_record, point_north, make_routing):
        catalog = [
            make_record(f"ad{i}", location=point_north(SEATTLE, 200 * (i + 1)), catalog_index=i)
            for i in range(3)
        ]
        routing = make_routing(hang={r.location for r in catalog})
        outcome = await find_recommendations(
            SEATTLE, StaticCatalogReader(catalog), TravelTimeEnricher(routing, timeout_seconds=0.05)
        )
        assert [m.record.id for m in outcome.matches] == ["ad0", "ad1", "ad2"]
        assert all(m.travel_duration_seconds is None for m in outcome.matches)


class TestFindNearbyBusinesses:
    def test_uses_conversation_ceiling_not_geofence(self, seattle_catalog):
        results = find_nearby_businesses(SEATTLE, StaticCatalogReader(seattle_catalog))
        assert [r.record.id for r in results] == ["a", "b"]
        assert CONVERSATION_RADIUS_CEILING_M == 20_000

    def test_ordered_by_proximity_ignoring_priority(self, make_record, point_north):
        catalog = [
            make_record("far-p1", location=point_north(SEATTLE, 5000), priority=1, catalog_index=0),
            make_record("near-p9", location=point_north(SEATTLE, 100), priority=9, catalog_index=1),
        ]
        results = find_nearby_businesses(SEATTLE, StaticCatalogReader(catalog))
        assert [r.record.id for r in results] == ["near-p9", "far-p1"]

    def test_beyond_ceiling_excluded(self, make_record, point_north):
        catalog = [make_record("edge", location=point_north(SEATTLE, 20_001), radius_meters=50_000)]
        assert find_nearby_businesses(SEATTLE, StaticCatalogReader(catalog)) == []

    def test_ceiling_is_not_widened_by_rounding(self, make_record, point_north):
        catalog = [make_record("edge", location=point_north(SEATTLE, 20_000.3), radius_meters=50_000)]
        assert find_nearby_businesses(SEATTLE, StaticCatalogReader(catalog)) == []

    def test_limit(self, make_record, point_north):
        catalog = [
            make_record(f"ad{i}", location=point_north(SEATTLE, 100 * (i + 1)), catalog_index=i)
            for i in range(8)
        ]
        results = find_nearby_businesses(SEATTLE, StaticCatalogReader(catalog), limit=5)
        assert [r.record.id for r in results] == [f"ad{i}" for i in range(5)]

    def test_unknown_location_reads_nothing(self):
        reader = MagicMock()
        assert find_nearby_businesses(None, reader) == []
        reader.load_active.assert_not_called()

    def test_catalog_failure_is_empty(self, unavailable_reader):
        assert find_nearby_businesses(SEATTLE, unavailable_reader) == []
