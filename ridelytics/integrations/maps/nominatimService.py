"""
Reverse geocoding via Nominatim
===============================

Turns the rider's coordinate into a short, human-readable label such as
``"Redmond, Washington"`` for the assistant prompt.  The label is cosmetic:
``describe_location`` never raises and falls back to ``"your area"``.

An in-memory LRU cache (1 000 entries) keyed on coordinates rounded to four
decimals (~11 m) avoids a lookup on every chat turn of a slow-moving ride.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Final

import httpx

from ridelytics.models import Coordinate

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_DEFAULT_BASE_URL = "https://nominatim.openstreetmap.org"
_DEFAULT_TIMEOUT_SECONDS = 5.0
_DEFAULT_USER_AGENT = "Ridelytics-PWA/1.0"
_CACHE_MAX_SIZE: Final[int] = 1000

FALLBACK_LABEL: Final[str] = "your area"
UNKNOWN_LOCATION_LABEL: Final[str] = "Unknown location"

# Most specific first
_LOCALITY_KEYS: Final[tuple[str, ...]] = ("city", "town", "suburb", "county", "state")


class GeocodingError(Exception):
    """Raised when a reverse geocoding request fails."""

    def __init__(self, message: str, status: str | None = None) -> None:
        super().__init__(message)
        self.status = status


# ---------------------------------------------------------------------------
# LRU cache (single-writer assumption in the asyncio event loop)
# ---------------------------------------------------------------------------


class _LabelCache:
    def __init__(self, max_size: int = _CACHE_MAX_SIZE) -> None:
        self._max_size = max_size
        self._store: OrderedDict[tuple[float, float], str] = OrderedDict()

    def get(self, key: tuple[float, float]) -> str | None:
        if key in self._store:
            self._store.move_to_end(key)
            return self._store[key]
        return None

    def put(self, key: tuple[float, float], value: str) -> None:
        if key in self._store:
            self._store.move_to_end(key)
            self._store[key] = value
            return
        if len(self._store) >= self._max_size:
            self._store.popitem(last=False)  # evict oldest
        self._store[key] = value

    def clear(self) -> None:
        self._store.clear()

    @property
    def size(self) -> int:
        return len(self._store)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def format_location_label(payload: dict[str, Any]) -> str:
    """Build ``"<locality>, <state>"`` from a Nominatim reverse payload."""
    address = payload.get("address") if isinstance(payload, dict) else None
    if not isinstance(address, dict):
        return FALLBACK_LABEL

    locality = next(filter(None, (_text(address.get(key)) for key in _LOCALITY_KEYS)), None)
    if locality is None:
        return FALLBACK_LABEL

    state = _text(address.get("state"))
    if state and state != locality:
        return f"{locality}, {state}"
    return locality


class NominatimReverseGeocoder:
    """Reverse geocoder backed by a Nominatim server."""

    def __init__(
        self,
        base_url: str = _DEFAULT_BASE_URL,
        *,
        user_agent: str = _DEFAULT_USER_AGENT,
        timeout: float = _DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
        cache_size: int = _CACHE_MAX_SIZE,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._user_agent = user_agent
        self._timeout = timeout
        self._client = client
        self._cache = _LabelCache(cache_size)

    def clear_cache(self) -> None:
        self._cache.clear()

    async def _fetch(self, params: dict[str, Any]) -> httpx.Response:
        url = f"{self._base_url}/reverse"
        headers = {"User-Agent": self._user_agent}
        if self._client is not None:
            return await self._client.get(url, params=params, headers=headers, timeout=self._timeout)
        async with httpx.AsyncClient() as client:
            return await client.get(url, params=params, headers=headers, timeout=self._timeout)

    async def reverse_geocode(self, location: Coordinate) -> str:
        """Look up a display label for ``location``.

        Raises:
            GeocodingError: On transport failure, non-2xx status or a body
                that is not JSON.
        """
        key = (round(location.latitude, 4), round(location.longitude, 4))
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        params = {
            "format": "json",
            "lat": location.latitude,
            "lon": location.longitude,
            "zoom": 10,
        }
        try:
            response = await self._fetch(params)
        except httpx.HTTPError as exc:
            raise GeocodingError(f"Nominatim request failed: {exc}") from exc

        if not response.is_success:
            raise GeocodingError(
                f"Nominatim error: HTTP {response.status_code}", status=str(response.status_code)
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise GeocodingError("Nominatim returned malformed JSON") from exc

        label = format_location_label(payload if isinstance(payload, dict) else {})
        self._cache.put(key, label)
        return label

    async def describe_location(self, location: Coordinate | None) -> str:
        """Display label for ``location``; never raises."""
        if location is None:
            return UNKNOWN_LOCATION_LABEL
        try:
            return await self.reverse_geocode(location)
        except GeocodingError as exc:
            logger.warning(
                "Reverse geocoding failed for (%.4f,%.4f): %s",
                location.latitude,
                location.longitude,
                exc,
            )
            return FALLBACK_LABEL
