"""
Routing client interface
========================

The travel-time enricher depends only on ``RoutingClient``: given an origin
and destination, return the road-network travel duration in whole seconds
or raise ``EnrichmentFailureError``.  Transport details (OSRM, Mapbox, a
test double) stay behind this seam.
"""

from __future__ import annotations

from typing import Any, Protocol

from ridelytics.models import Coordinate


class EnrichmentFailureError(Exception):
    """Raised when a routing lookup produced no usable travel duration."""

    def __init__(self, message: str, status: str | None = None, raw: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.raw = raw


class EnrichmentTimeoutError(EnrichmentFailureError):
    """Raised when a routing lookup exceeded its deadline."""


class RoutingClient(Protocol):
    async def get_route_duration(self, origin: Coordinate, destination: Coordinate) -> int:
        """Travel duration in seconds from ``origin`` to ``destination``."""
        ...
