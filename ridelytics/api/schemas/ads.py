"""
Pydantic v2 schemas for the advertisement API
=============================================

Wire format is camelCase (``businessName``, ``distanceMeters``) to match the
web client; Python attributes stay snake_case.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ridelytics.models import AdvertisementRecord, MatchResult


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocationOut(CamelModel):
    latitude: float
    longitude: float


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------

class RecommendedAdOut(CamelModel):
    """A single geofence match, ranked and optionally travel-time enriched."""

    id: str
    business_name: str
    image_url: str
    website_url: str
    location: LocationOut
    distance_meters: int = Field(ge=0, description="Great-circle distance in whole metres")
    travel_duration_seconds: Optional[int] = Field(
        default=None,
        ge=0,
        description="Road travel time from the user; null when routing was unavailable",
    )

    @classmethod
    def from_match(cls, match: MatchResult) -> RecommendedAdOut:
        record = match.record
        return cls(
            id=record.id,
            business_name=record.business_name,
            image_url=record.image_url,
            website_url=record.website_url,
            location=LocationOut(
                latitude=record.location.latitude,
                longitude=record.location.longitude,
            ),
            distance_meters=match.distance_meters,
            travel_duration_seconds=match.travel_duration_seconds,
        )


class RecommendationsResponse(CamelModel):
    ads: list[RecommendedAdOut]
    total: int
    message: Optional[str] = None


# ---------------------------------------------------------------------------
# Catalog dump
# ---------------------------------------------------------------------------

class CatalogAdOut(CamelModel):
    id: str
    business_name: str
    description: Optional[str] = None
    image_url: str
    website_url: str
    latitude: float
    longitude: float
    radius: float
    active: bool
    priority: int

    @classmethod
    def from_record(cls, record: AdvertisementRecord) -> CatalogAdOut:
        return cls(
            id=record.id,
            business_name=record.business_name,
            description=record.description,
            image_url=record.image_url,
            website_url=record.website_url,
            latitude=record.location.latitude,
            longitude=record.location.longitude,
            radius=record.radius_meters,
            active=record.active,
            priority=record.priority,
        )


class CatalogResponse(CamelModel):
    ads: list[CatalogAdOut]
