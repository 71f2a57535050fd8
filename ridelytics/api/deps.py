"""
Shared FastAPI dependencies for the Ridelytics backend.

Each collaborator the routes need (catalog reader, routing-backed
enricher, reverse geocoder, text generator) is built from ``settings`` here
so tests can swap any of them via ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache
from string import Template
from typing import Annotated

from fastapi import Depends

from ridelytics.core.config import settings
from ridelytics.core.prompts import load_prompt_template
from ridelytics.integrations.llm import GeminiTextGenerator, TextGenerator
from ridelytics.integrations.maps import NominatimReverseGeocoder, OsrmRoutingClient, RoutingClient
from ridelytics.services.catalogReader import CatalogReader, JsonFileCatalogReader
from ridelytics.services.chatService import ChatService, LocationDescriber
from ridelytics.services.travelTimeEnricher import TravelTimeEnricher

# ---------------------------------------------------------------------------
# Process-wide singletons
# ---------------------------------------------------------------------------
# The catalog reader and geocoder hold caches that should outlive a single
# request; everything else is cheap to build per request.
# ---------------------------------------------------------------------------


@lru_cache(maxsize=1)
def get_catalog_reader() -> CatalogReader:
    return JsonFileCatalogReader(settings.catalog_path)


@lru_cache(maxsize=1)
def get_location_describer() -> LocationDescriber:
    return NominatimReverseGeocoder(
        settings.geocoder_base_url,
        user_agent=settings.geocoder_user_agent,
        timeout=settings.geocoder_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_prompt_template() -> Template:
    return load_prompt_template(settings.assistant_prompt_path)


def get_routing_client() -> RoutingClient:
    return OsrmRoutingClient(
        settings.routing_base_url,
        profile=settings.routing_profile,
        timeout=settings.routing_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_text_generator() -> TextGenerator:
    return GeminiTextGenerator(
        settings.gemini_api_key,
        model=settings.gemini_model,
        temperature=settings.gemini_temperature,
        max_output_tokens=settings.gemini_max_tokens,
        timeout=settings.gemini_timeout_seconds,
    )


CatalogReaderDep = Annotated[CatalogReader, Depends(get_catalog_reader)]


def get_travel_time_enricher(
    routing_client: Annotated[RoutingClient, Depends(get_routing_client)],
) -> TravelTimeEnricher:
    return TravelTimeEnricher(routing_client, timeout_seconds=settings.routing_timeout_seconds)


def get_chat_service(
    catalog_reader: CatalogReaderDep,
    location_describer: Annotated[LocationDescriber, Depends(get_location_describer)],
    text_generator: Annotated[TextGenerator, Depends(get_text_generator)],
    prompt_template: Annotated[Template, Depends(get_prompt_template)],
) -> ChatService:
    return ChatService(
        catalog_reader,
        location_describer,
        text_generator,
        prompt_template,
        radius_ceiling_m=settings.chat_radius_ceiling_meters,
        max_businesses=settings.chat_max_businesses,
    )


TravelTimeEnricherDep = Annotated[TravelTimeEnricher, Depends(get_travel_time_enricher)]
ChatServiceDep = Annotated[ChatService, Depends(get_chat_service)]
