"""
E2E test fixtures for the Ridelytics API.

Provides an httpx AsyncClient wired to the FastAPI app via ASGI transport
(no network needed).  The catalog, routing, reverse geocoding, and text
generation collaborators are replaced through ``app.dependency_overrides``
so the full route -> service flow is exercised.
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from ridelytics.api.deps import (
    get_catalog_reader,
    get_location_describer,
    get_routing_client,
    get_text_generator,
)
from ridelytics.main import app
from ridelytics.services.catalogReader import StaticCatalogReader


@pytest.fixture
def catalog_reader(seattle_catalog, make_record):
    inactive = make_record("off", active=False, catalog_index=2)
    return StaticCatalogReader([*seattle_catalog, inactive])


@pytest.fixture
def overrides(catalog_reader, fake_routing, fake_describer, fake_generator):
    """Default collaborator overrides; tests may replace entries before use."""
    table = {
        get_catalog_reader: lambda: catalog_reader,
        get_routing_client: lambda: fake_routing,
        get_location_describer: lambda: fake_describer,
        get_text_generator: lambda: fake_generator,
    }
    app.dependency_overrides.update(table)
    yield app.dependency_overrides
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(overrides) -> AsyncGenerator[AsyncClient, None]:
    """httpx AsyncClient connected to the app via ASGI transport."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
