"""
Advertisement Ranking
=====================

Two orderings over geofence matches:

  1. ``rank_matches``      -- sponsored-surface order: priority ascending
                              (lower value ranks higher), then distance
                              ascending.
  2. ``rank_by_proximity`` -- conversational order: distance ascending only.

Both sort on the unrounded distance so candidates a fraction of a metre
apart keep a definite order, and both fall back to catalog position as the
last key.  The result is a total order: identical inputs always produce
identical output.
"""

from __future__ import annotations

from typing import Iterable

from ridelytics.models import AdDistance, MatchResult
from ridelytics.services.geoService import round_meters


def _priority_key(match: AdDistance) -> tuple[int, float, int]:
    return (match.record.priority, match.distance_m, match.record.catalog_index)


def _proximity_key(match: AdDistance) -> tuple[float, int]:
    return (match.distance_m, match.record.catalog_index)


def rank_matches(matches: Iterable[AdDistance]) -> list[AdDistance]:
    """Order matches by priority, then distance, then catalog position."""
    return sorted(matches, key=_priority_key)


def rank_by_proximity(matches: Iterable[AdDistance]) -> list[AdDistance]:
    """Order matches by distance, then catalog position. Priority is ignored."""
    return sorted(matches, key=_proximity_key)


def to_match_results(ranked: Iterable[AdDistance]) -> list[MatchResult]:
    """Freeze ranked matches into ``MatchResult`` values with whole-metre distances."""
    return [
        MatchResult(
            record=match.record,
            distance_meters=round_meters(match.distance_m),
            raw_distance_m=match.distance_m,
        )
        for match in ranked
    ]
