"""
Coordinate value type
=====================

A validated (latitude, longitude) pair in decimal degrees.  Out-of-range or
non-finite values are rejected with ``InvalidCoordinateError`` at
construction time, so a ``Coordinate`` instance is always usable by the
distance and matching code without further checks.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

LATITUDE_RANGE: tuple[float, float] = (-90.0, 90.0)
LONGITUDE_RANGE: tuple[float, float] = (-180.0, 180.0)


class InvalidCoordinateError(ValueError):
    """Raised for malformed, non-finite or out-of-range coordinates."""

    def __init__(self, message: str, field: str | None = None, value: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


def _coerce(field: str, value: Any) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidCoordinateError(f"{field} is required", field=field, value=value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidCoordinateError(
            f"{field} must be a valid number", field=field, value=value
        ) from None
    if not math.isfinite(number):
        raise InvalidCoordinateError(
            f"{field} must be a valid number", field=field, value=value
        )
    return number


@dataclass(frozen=True)
class Coordinate:
    """A point on the Earth's surface in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        lat = _coerce("latitude", self.latitude)
        lng = _coerce("longitude", self.longitude)

        if not LATITUDE_RANGE[0] <= lat <= LATITUDE_RANGE[1]:
            raise InvalidCoordinateError(
                f"latitude {lat} is out of valid range", field="latitude", value=lat
            )
        if not LONGITUDE_RANGE[0] <= lng <= LONGITUDE_RANGE[1]:
            raise InvalidCoordinateError(
                f"longitude {lng} is out of valid range", field="longitude", value=lng
            )

        # Normalise numeric strings / ints to float on the frozen instance
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lng)

    def as_tuple(self) -> tuple[float, float]:
        """Return ``(lat, lng)``."""
        return (self.latitude, self.longitude)
