"""Ridelytics API -- Main Application Entry Point

Creates the FastAPI application, configures CORS for the web client,
registers the API route modules under the ``/api`` prefix, and maps
coordinate validation errors to 400 responses.

Run with::

    uvicorn ridelytics.main:app --host 0.0.0.0 --port 3001 --reload
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ridelytics.api.routes import ads, chat
from ridelytics.core.config import settings
from ridelytics.models import InvalidCoordinateError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application instance
# ---------------------------------------------------------------------------

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
)


# ---------------------------------------------------------------------------
# CORS middleware
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Error handlers
# ---------------------------------------------------------------------------

@app.exception_handler(InvalidCoordinateError)
async def invalid_coordinate_handler(request: Request, exc: InvalidCoordinateError) -> JSONResponse:
    logger.info("Rejected invalid coordinate on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid coordinates", "message": str(exc), "field": exc.field},
    )


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

_prefix = settings.api_prefix


@app.get(f"{_prefix}/health", tags=["Health"])
async def health():
    """Lightweight health check for load balancers and readiness probes."""
    return {"status": "ok", "message": "Backend is running", "version": settings.app_version}


# ---------------------------------------------------------------------------
# Register API route modules
# ---------------------------------------------------------------------------

app.include_router(ads.router, prefix=_prefix)
app.include_router(chat.router, prefix=_prefix)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=settings.log_level)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
