"""
FastAPI application factory.

* Registers routes for proximity search, distances and admin.
* Loads the place dataset and opens the geocoder via lifespan events.
* Maps domain / upstream errors to HTTP statuses.
* Applies rate-limiting and CORS middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from locatemycity.api.middleware import limiter
from locatemycity.api.routes import admin, distance, places
from locatemycity.config import settings
from locatemycity.domain.entities import InvalidCoordinate, InvalidQueryParameter
from locatemycity.infrastructure.dataset import DatasetUnavailable, load_dataset
from locatemycity.infrastructure.geocoder import GeocodingError, NominatimGeocoder

logging.basicConfig(level=logging.INFO)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the dataset snapshot and open the geocoder; close it on shutdown."""
    try:
        app.state.snapshot = await load_dataset(settings)
    except DatasetUnavailable:
        logger.exception("Place dataset unavailable; proximity search disabled")
        app.state.snapshot = None

    geocoder = NominatimGeocoder(
        base_url=settings.nominatim_url,
        user_agent=settings.nominatim_user_agent,
        timeout=settings.geocode_timeout_seconds,
    )
    app.state.geocoder = geocoder
    yield
    await geocoder.aclose()


async def _unprocessable(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def _bad_gateway(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": str(exc)})


async def _unavailable(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title="LocateMyCity API",
        description=(
            "Distances between places, travel-time estimates and "
            "\"places exactly N miles from X\" radius search over the "
            "GeoNames cities15000 dataset."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain / upstream errors
    app.add_exception_handler(InvalidCoordinate, _unprocessable)
    app.add_exception_handler(InvalidQueryParameter, _unprocessable)
    app.add_exception_handler(GeocodingError, _bad_gateway)
    app.add_exception_handler(DatasetUnavailable, _unavailable)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Routers
    app.include_router(places.router, prefix="/api/v1")
    app.include_router(distance.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app
