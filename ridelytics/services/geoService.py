"""
Geo Service
===========

Geographic utility functions for distance calculations and geofence
filtering.  Used by the matching engine to decide which sponsored
businesses are eligible for a user at a given location.

Uses the haversine formula for great-circle distance between two points
on Earth's surface with the mean Earth radius.  Distances are returned as
raw floats in metres; rounding to whole metres happens only when a
``MatchResult`` is built (see ``round_meters``).
"""

from __future__ import annotations

import math
from typing import Sequence

from ridelytics.models import AdDistance, AdvertisementRecord, Coordinate

# Earth's mean radius in metres
EARTH_RADIUS_M: float = 6_371_000.0


def haversine_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate the great-circle distance between two points using the
    haversine formula.

    Args:
        lat1: Latitude of point 1 in decimal degrees.
        lon1: Longitude of point 1 in decimal degrees.
        lat2: Latitude of point 2 in decimal degrees.
        lon2: Longitude of point 2 in decimal degrees.

    Returns:
        Distance in metres.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    # Float error can push ``a`` marginally past 1 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


def distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in metres between two coordinates."""
    return haversine_distance(a.latitude, a.longitude, b.latitude, b.longitude)


def round_meters(distance_m: float) -> int:
    """Round a distance to the nearest whole metre, halves rounding up."""
    return int(math.floor(distance_m + 0.5))


def filter_by_radius(
    user: Coordinate,
    catalog: Sequence[AdvertisementRecord],
    radius_override_m: float | None = None,
) -> list[AdDistance]:
    """Return the catalog records whose service area covers ``user``.

    A record matches when its distance, rounded to whole metres, is at most
    its own ``radius_meters``.  When ``radius_override_m`` is given it
    replaces every record's geofence and is compared against the unrounded
    distance.  Both boundaries are inclusive.

    Inactive records never match.  Catalog order is preserved; ordering is
    the ranking step's job.

    Args:
        user: Validated user coordinate.
        catalog: Snapshot of advertisement records.
        radius_override_m: Optional fixed radius in metres applied to every
            record instead of its own geofence.

    Returns:
        List of ``AdDistance`` carrying the unrounded distance.
    """
    if not isinstance(user, Coordinate):
        # Re-validate anything duck-typed as a coordinate
        user = Coordinate(user[0], user[1])

    results: list[AdDistance] = []

    for record in catalog:
        if not record.active:
            continue

        distance_m = distance(user, record.location)

        if radius_override_m is not None:
            # Fixed ceilings compare the raw distance
            matched = distance_m <= radius_override_m
        else:
            matched = round_meters(distance_m) <= record.radius_meters

        if matched:
            results.append(AdDistance(record=record, distance_m=distance_m))

    return results
