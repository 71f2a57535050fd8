"""
Advertisement Matching Engine
=============================

Finds and orders the sponsored businesses to show a user at a location.
Two radius policies are kept deliberately distinct:

  GEOFENCE (ad surface)
    A record matches only inside its own ``radius_meters``.  Matches are
    ranked by priority, then distance, then enriched with travel times.

  CONVERSATION CEILING (assistant context)
    Every active record within a fixed ceiling (20 km by default) matches,
    regardless of its own geofence, so nearby partners stay mentionable.
    Matches are ordered purely by proximity and capped.

Catalog unavailability is absorbed here: it is logged and treated as an
empty catalog.

Key functions:
  - match_ads_at             -- geofence filter + priority ranking
  - find_recommendations     -- match_ads_at + travel time enrichment
  - find_nearby_businesses   -- conversation-ceiling filter + proximity order
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Sequence

from ridelytics.algorithms.adRanking import rank_by_proximity, rank_matches, to_match_results
from ridelytics.models import AdvertisementRecord, Coordinate, MatchResult
from ridelytics.services.catalogReader import CatalogReader, CatalogUnavailableError
from ridelytics.services.contextAssembler import DEFAULT_CONTEXT_LIMIT
from ridelytics.services.geoService import filter_by_radius
from ridelytics.services.travelTimeEnricher import TravelTimeEnricher

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

CONVERSATION_RADIUS_CEILING_M: float = 20_000.0

NO_ADS_MESSAGE = "No ads available in your area"


@dataclass(frozen=True)
class RecommendationOutcome:
    """Ranked, enriched matches for the ad surface."""

    matches: list[MatchResult] = field(default_factory=list)
    message: str | None = None

    @property
    def total(self) -> int:
        return len(self.matches)


def load_active_catalog(catalog_reader: CatalogReader) -> Sequence[AdvertisementRecord]:
    """Active catalog snapshot, or an empty one if the store is unavailable."""
    try:
        return catalog_reader.load_active()
    except CatalogUnavailableError as exc:
        logger.warning("Ad catalog unavailable, serving no matches: %s", exc)
        return ()


def match_ads_at(
    user: Coordinate,
    catalog: Sequence[AdvertisementRecord],
) -> list[MatchResult]:
    """Geofence matches for ``user``, in ad-surface rank order."""
    matches = filter_by_radius(user, catalog)
    return to_match_results(rank_matches(matches))


async def find_recommendations(
    user: Coordinate,
    catalog_reader: CatalogReader,
    enricher: TravelTimeEnricher,
) -> RecommendationOutcome:
    """Full ad-surface pipeline: catalog -> geofence -> rank -> travel time."""
    catalog = await asyncio.to_thread(load_active_catalog, catalog_reader)
    ranked = match_ads_at(user, catalog)

    logger.info(
        "Location: (%s, %s), Matching ads: %d",
        user.latitude,
        user.longitude,
        len(ranked),
    )

    if not ranked:
        return RecommendationOutcome(matches=[], message=NO_ADS_MESSAGE)

    enriched = await enricher.enrich(ranked, origin=user)
    return RecommendationOutcome(matches=enriched)


def find_nearby_businesses(
    user: Coordinate | None,
    catalog_reader: CatalogReader,
    *,
    radius_ceiling_m: float = CONVERSATION_RADIUS_CEILING_M,
    limit: int = DEFAULT_CONTEXT_LIMIT,
) -> list[MatchResult]:
    """Closest active businesses within the conversation ceiling.

    Returns an empty list when the user's location is unknown.
    """
    if user is None:
        return []

    catalog = load_active_catalog(catalog_reader)
    matches = filter_by_radius(user, catalog, radius_override_m=radius_ceiling_m)
    return to_match_results(rank_by_proximity(matches)[:limit])
