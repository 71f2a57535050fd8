"""
Advertisement catalog and match value types
===========================================

``AdvertisementRecord`` is one geofenced sponsored business as read from the
catalog.  ``AdDistance`` pairs a record with its raw great-circle distance
from the user and is what the filter and ranking steps operate on.
``MatchResult`` is the externally visible, rounded result; enrichment
produces a *new* ``MatchResult`` rather than mutating an existing one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ridelytics.models.geo import Coordinate


@dataclass(frozen=True)
class AdvertisementRecord:
    """A sponsored business with a circular service area."""

    id: str
    business_name: str
    image_url: str
    website_url: str
    location: Coordinate
    radius_meters: float
    active: bool = True
    priority: int = 0
    description: str | None = None

    # Position in the catalog snapshot; final ranking tie-break
    catalog_index: int = 0


@dataclass(frozen=True)
class AdDistance:
    """A catalog record paired with its unrounded distance from the user."""

    record: AdvertisementRecord
    distance_m: float


@dataclass(frozen=True)
class MatchResult:
    """A recommended record as exposed to callers."""

    record: AdvertisementRecord
    distance_meters: int
    travel_duration_seconds: int | None = None

    # Unrounded distance, kept for proximity ordering and display
    raw_distance_m: float | None = None

    @property
    def precise_distance_m(self) -> float:
        if self.raw_distance_m is not None:
            return self.raw_distance_m
        return float(self.distance_meters)

    def with_travel_duration(self, seconds: int | None) -> MatchResult:
        return replace(self, travel_duration_seconds=seconds)
