"""
Maps & Location integration package
===================================

Public API for road-network travel times and reverse geocoding.

Typical usage::

    from ridelytics.integrations.maps import (
        OsrmRoutingClient,
        RoutingClient,
        EnrichmentFailureError,
        EnrichmentTimeoutError,
        NominatimReverseGeocoder,
    )
"""

from ridelytics.integrations.maps.nominatimService import (
    FALLBACK_LABEL,
    UNKNOWN_LOCATION_LABEL,
    GeocodingError,
    NominatimReverseGeocoder,
    format_location_label,
)
from ridelytics.integrations.maps.osrmService import OsrmRoutingClient
from ridelytics.integrations.maps.routing import (
    EnrichmentFailureError,
    EnrichmentTimeoutError,
    RoutingClient,
)

__all__ = [
    # routing
    "RoutingClient",
    "EnrichmentFailureError",
    "EnrichmentTimeoutError",
    # osrmService
    "OsrmRoutingClient",
    # nominatimService
    "NominatimReverseGeocoder",
    "GeocodingError",
    "format_location_label",
    "FALLBACK_LABEL",
    "UNKNOWN_LOCATION_LABEL",
]
