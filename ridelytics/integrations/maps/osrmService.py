"""
OSRM routing client
===================

Async wrapper around the OSRM ``route`` service, returning the duration of
the first route between two points.

Every failure mode is normalised to ``EnrichmentFailureError`` (or
``EnrichmentTimeoutError``): transport errors, non-2xx status, a body that
is not JSON, an OSRM ``code`` other than ``Ok``, or a response with no
usable route.  No retries: the caller works under a short fixed deadline.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from ridelytics.integrations.maps.routing import EnrichmentFailureError, EnrichmentTimeoutError
from ridelytics.models import Coordinate

logger = logging.getLogger(__name__)

_DEFAULT_BASE_URL = "https://router.project-osrm.org"
_DEFAULT_TIMEOUT_SECONDS = 5.0


class OsrmRoutingClient:
    """``RoutingClient`` backed by an OSRM HTTP server.

    Args:
        base_url: OSRM server root.
        profile: Routing profile, e.g. ``driving``.
        timeout: Per-request timeout in seconds.
        client: Optional shared ``httpx.AsyncClient``.  When omitted a
            short-lived client is opened per request.
    """

    def __init__(
        self,
        base_url: str = _DEFAULT_BASE_URL,
        *,
        profile: str = "driving",
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._profile = profile
        self._timeout = timeout
        self._client = client

    def route_url(self, origin: Coordinate, destination: Coordinate) -> str:
        # OSRM coordinates format: lng,lat;lng,lat
        coords_str = (
            f"{origin.longitude},{origin.latitude};"
            f"{destination.longitude},{destination.latitude}"
        )
        return f"{self._base_url}/route/v1/{self._profile}/{coords_str}"

    async def _fetch(self, url: str) -> httpx.Response:
        params = {"overview": "false"}
        if self._client is not None:
            return await self._client.get(url, params=params, timeout=self._timeout)
        async with httpx.AsyncClient() as client:
            return await client.get(url, params=params, timeout=self._timeout)

    async def get_route_duration(self, origin: Coordinate, destination: Coordinate) -> int:
        """Return the travel duration of the first route, in whole seconds.

        Raises:
            EnrichmentTimeoutError: The request timed out.
            EnrichmentFailureError: Any other failure to obtain a duration.
        """
        url = self.route_url(origin, destination)

        try:
            response = await self._fetch(url)
        except httpx.TimeoutException as exc:
            raise EnrichmentTimeoutError(f"OSRM request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise EnrichmentFailureError(f"OSRM request failed: {exc}") from exc

        if not response.is_success:
            raise EnrichmentFailureError(
                f"OSRM error: HTTP {response.status_code}",
                status=str(response.status_code),
                raw=response.text,
            )

        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            raise EnrichmentFailureError(
                f"OSRM returned non-JSON response ({content_type or 'no content-type'})",
                raw=response.text,
            )

        try:
            data: Any = response.json()
        except ValueError as exc:
            raise EnrichmentFailureError("OSRM returned malformed JSON", raw=response.text) from exc

        return _extract_duration(data)


def _extract_duration(data: Any) -> int:
    if not isinstance(data, dict):
        raise EnrichmentFailureError("Unexpected response format from OSRM", raw=data)

    code = data.get("code", "")
    if code != "Ok":
        raise EnrichmentFailureError(
            f"OSRM route error: {code} -- {data.get('message', '')}", status=code, raw=data
        )

    routes = data.get("routes") or []
    if not routes or not isinstance(routes[0], dict):
        raise EnrichmentFailureError("OSRM returned no routes", status=code, raw=data)

    duration = routes[0].get("duration")
    if isinstance(duration, bool) or not isinstance(duration, (int, float)):
        raise EnrichmentFailureError("OSRM route has no duration", status=code, raw=data)
    if not math.isfinite(duration) or duration < 0:
        raise EnrichmentFailureError(f"OSRM route duration {duration!r} is invalid", raw=data)

    return int(math.floor(duration + 0.5))
