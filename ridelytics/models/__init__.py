from ridelytics.models.advertisement import AdDistance, AdvertisementRecord, MatchResult
from ridelytics.models.geo import Coordinate, InvalidCoordinateError

__all__ = [
    "AdDistance",
    "AdvertisementRecord",
    "Coordinate",
    "InvalidCoordinateError",
    "MatchResult",
]
