"""
Travel Time Enricher
====================

Augments ranked matches with road-network travel durations from a
``RoutingClient``.

One routing lookup is issued per candidate, all concurrently, each bounded
by its own deadline.  A lookup that times out or fails leaves that
candidate's ``travel_duration_seconds`` as ``None``; it never drops the
candidate or aborts the batch.  Output order and length always equal the
input's.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from ridelytics.integrations.maps import (
    EnrichmentFailureError,
    EnrichmentTimeoutError,
    RoutingClient,
)
from ridelytics.models import Coordinate, MatchResult

logger = logging.getLogger(__name__)

DEFAULT_ROUTING_TIMEOUT_SECONDS: float = 5.0


class TravelTimeEnricher:
    def __init__(
        self,
        routing_client: RoutingClient,
        timeout_seconds: float = DEFAULT_ROUTING_TIMEOUT_SECONDS,
    ) -> None:
        self._routing_client = routing_client
        self._timeout_seconds = timeout_seconds

    async def _duration_for(self, match: MatchResult, origin: Coordinate) -> int | None:
        name = match.record.business_name
        try:
            return await asyncio.wait_for(
                self._routing_client.get_route_duration(origin, match.record.location),
                timeout=self._timeout_seconds,
            )
        except (asyncio.TimeoutError, EnrichmentTimeoutError):
            logger.warning("Routing request timeout for %s", name)
        except EnrichmentFailureError as exc:
            logger.warning("Routing lookup failed for %s: %s", name, exc)
        except Exception as exc:
            logger.error(
                "Unexpected error fetching route duration for %s: %s",
                name,
                exc,
                exc_info=True,
            )
        return None

    async def enrich(
        self,
        ranked: Sequence[MatchResult],
        origin: Coordinate,
    ) -> list[MatchResult]:
        """Return ``ranked`` with travel durations filled in where available."""
        if not ranked:
            return []

        durations = await asyncio.gather(
            *(self._duration_for(match, origin) for match in ranked)
        )

        enriched = [
            match.with_travel_duration(seconds)
            for match, seconds in zip(ranked, durations)
        ]

        missing = sum(1 for seconds in durations if seconds is None)
        if missing:
            logger.info("Travel time unavailable for %d of %d matches", missing, len(ranked))
        return enriched
