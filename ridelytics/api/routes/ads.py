"""
Advertisement REST API endpoints
================================

Endpoints:
  - GET /api/ads/recommendations   Geofenced, ranked ads for a location
  - GET /api/ads                   Full catalog dump (debugging)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from ridelytics.api.deps import CatalogReaderDep, TravelTimeEnricherDep
from ridelytics.api.schemas.ads import CatalogAdOut, CatalogResponse, RecommendationsResponse, RecommendedAdOut
from ridelytics.models import Coordinate
from ridelytics.services.catalogReader import CatalogUnavailableError
from ridelytics.services.matchingEngine import find_recommendations

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ads", tags=["Ads"])


@router.get(
    "/recommendations",
    response_model=RecommendationsResponse,
    summary="Ads whose service area covers the given location",
)
async def recommendations_endpoint(
    catalog_reader: CatalogReaderDep,
    enricher: TravelTimeEnricherDep,
    latitude: Optional[str] = Query(default=None, description="User latitude"),
    longitude: Optional[str] = Query(default=None, description="User longitude"),
):
    """Return active ads whose geofence contains the user, ordered by
    priority then distance, each with a travel time when routing succeeds.

    Coordinates are validated before the catalog is read.
    """
    if not latitude or not longitude:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Missing required parameters",
                "message": "Both latitude and longitude are required",
            },
        )

    # Raises InvalidCoordinateError -> 400 via the app exception handler
    user = Coordinate(latitude, longitude)

    outcome = await find_recommendations(user, catalog_reader, enricher)
    return RecommendationsResponse(
        ads=[RecommendedAdOut.from_match(match) for match in outcome.matches],
        total=outcome.total,
        message=outcome.message,
    )


@router.get("", response_model=CatalogResponse, summary="Every ad in the catalog")
async def list_ads_endpoint(catalog_reader: CatalogReaderDep) -> CatalogResponse:
    try:
        records = await asyncio.to_thread(catalog_reader.load_all)
    except CatalogUnavailableError as exc:
        logger.error("Error reading ad catalog: %s", exc)
        records = ()
    return CatalogResponse(ads=[CatalogAdOut.from_record(record) for record in records])
