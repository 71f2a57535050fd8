"""
Shared pytest fixtures for Ridelytics backend tests.

Provides catalog record factories, the Seattle sample catalog, and routing /
geocoding / text-generation test doubles so no test touches the network.
"""

from __future__ import annotations

import asyncio
import math
from typing import Any, Callable

import pytest

from ridelytics.integrations.llm import UpstreamGenerationError
from ridelytics.integrations.maps import EnrichmentFailureError
from ridelytics.models import AdvertisementRecord, Coordinate
from ridelytics.services.geoService import EARTH_RADIUS_M

DOWNTOWN_SEATTLE = Coordinate(47.6062, -122.3321)
REDMOND = Coordinate(47.6740, -122.1215)


def point_north_of(origin: Coordinate, meters: float) -> Coordinate:
    """A coordinate ``meters`` due north of ``origin`` along its meridian."""
    return Coordinate(origin.latitude + math.degrees(meters / EARTH_RADIUS_M), origin.longitude)


# ---------------------------------------------------------------------------
# Catalog fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_record() -> Callable[..., AdvertisementRecord]:
    """Factory for ``AdvertisementRecord`` with overridable fields."""

    def _make(
        id: str = "ad",
        *,
        location: Coordinate = DOWNTOWN_SEATTLE,
        radius_meters: float = 5000,
        priority: int = 1,
        active: bool = True,
        catalog_index: int = 0,
        business_name: str | None = None,
        description: str | None = "A local partner",
        website_url: str | None = None,
    ) -> AdvertisementRecord:
        return AdvertisementRecord(
            id=id,
            business_name=business_name or f"Business {id}",
            description=description,
            image_url=f"/images/{id}.jpg",
            website_url=website_url or f"https://example.com/{id}",
            location=location,
            radius_meters=radius_meters,
            active=active,
            priority=priority,
            catalog_index=catalog_index,
        )

    return _make


@pytest.fixture
def seattle_catalog(make_record) -> list[AdvertisementRecord]:
    """Two-record catalog: one downtown, one in Redmond ~17 km away."""
    return [
        make_record("a", location=DOWNTOWN_SEATTLE, radius_meters=5000, priority=1, catalog_index=0),
        make_record("b", location=REDMOND, radius_meters=8000, priority=2, catalog_index=1),
    ]


@pytest.fixture
def catalog_payload() -> list[dict[str, Any]]:
    """Raw ``ads.json`` content in the on-disk camelCase format."""
    return [
        {
            "id": "a",
            "businessName": "Lune Cafe",
            "description": "Artisanal coffee",
            "imageUrl": "/images/a.jpg",
            "websiteUrl": "https://example.com/a",
            "latitude": 47.6062,
            "longitude": -122.3321,
            "radius": 5000,
            "active": True,
            "priority": 1,
        },
        {
            "id": "b",
            "businessName": "Qamaria Coffee",
            "description": "Yemeni coffee",
            "imageUrl": "/images/b.jpg",
            "websiteUrl": "https://example.com/b",
            "latitude": 47.6740,
            "longitude": -122.1215,
            "radius": 8000,
            "active": True,
            "priority": 2,
        },
        {
            "id": "c",
            "businessName": "Closed Shop",
            "imageUrl": "/images/c.jpg",
            "websiteUrl": "https://example.com/c",
            "latitude": 47.6062,
            "longitude": -122.3321,
            "radius": 5000,
            "active": False,
            "priority": 0,
        },
    ]


# ---------------------------------------------------------------------------
# Collaborator doubles
# ---------------------------------------------------------------------------


class FakeRoutingClient:
    """Routing double keyed by destination coordinate.

    ``durations`` maps a destination to seconds; ``failures`` to an exception
    to raise; ``hang`` lists destinations whose lookup never completes.
    Unknown destinations get ``default``.
    """

    def __init__(
        self,
        durations: dict[Coordinate, int] | None = None,
        *,
        failures: dict[Coordinate, Exception] | None = None,
        hang: set[Coordinate] | None = None,
        default: int = 600,
    ) -> None:
        self.durations = durations or {}
        self.failures = failures or {}
        self.hang = hang or set()
        self.default = default
        self.calls: list[tuple[Coordinate, Coordinate]] = []

    async def get_route_duration(self, origin: Coordinate, destination: Coordinate) -> int:
        self.calls.append((origin, destination))
        if destination in self.hang:
            await asyncio.sleep(3600)
        if destination in self.failures:
            raise self.failures[destination]
        return self.durations.get(destination, self.default)


class FakeLocationDescriber:
    def __init__(self, label: str = "Seattle, Washington") -> None:
        self.label = label
        self.calls: list[Coordinate | None] = []

    async def describe_location(self, location: Coordinate | None) -> str:
        self.calls.append(location)
        return self.label if location is not None else "Unknown location"


class FakeTextGenerator:
    def __init__(self, reply: str = "We're partnered with Lune Cafe!", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def fake_routing() -> FakeRoutingClient:
    return FakeRoutingClient()


@pytest.fixture
def fake_describer() -> FakeLocationDescriber:
    return FakeLocationDescriber()


@pytest.fixture
def fake_generator() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest.fixture
def failing_generator() -> FakeTextGenerator:
    return FakeTextGenerator(error=UpstreamGenerationError("Gemini API client error: HTTP 403", status="403"))


@pytest.fixture
def routing_failure() -> EnrichmentFailureError:
    return EnrichmentFailureError("OSRM returned no routes", status="NoRoute")


@pytest.fixture
def make_routing() -> type[FakeRoutingClient]:
    return FakeRoutingClient


@pytest.fixture
def point_north() -> Callable[[Coordinate, float], Coordinate]:
    return point_north_of
