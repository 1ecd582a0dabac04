"""
Proximity endpoints
===================

GET /api/v1/places/near                          -- places ~N units from an origin
GET /api/v1/places/exactly/{distance}/from/{slug} -- same, slug + miles form
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from starlette.concurrency import run_in_threadpool

from locatemycity.api.dependencies import get_engine, get_geocoder, get_places
from locatemycity.api.middleware import limiter, rate_limit
from locatemycity.api.schemas import (
    NearbyPlacesResponse,
    PlaceResultResponse,
    ResolvedPlaceResponse,
)
from locatemycity.config import settings
from locatemycity.domain.entities import DistanceQuery
from locatemycity.domain.enums import DistanceUnit
from locatemycity.domain.geodesy import slug_to_display
from locatemycity.domain.proximity import ProximitySearchEngine
from locatemycity.infrastructure.dataset import PlaceSnapshot
from locatemycity.infrastructure.geocoder import Geocoder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/places", tags=["places"])


async def _search(
    origin_text: str,
    distance: float,
    tolerance: Optional[float],
    unit: DistanceUnit,
    limit: Optional[int],
    snapshot: PlaceSnapshot,
    geocoder: Geocoder,
    engine: ProximitySearchEngine,
) -> NearbyPlacesResponse:
    origin = await geocoder.resolve(origin_text)
    if origin is None:
        raise HTTPException(
            status_code=404, detail=f"Could not resolve origin {origin_text!r}"
        )

    query = DistanceQuery.build(
        origin.coordinate,
        distance,
        tolerance,
        unit,
        default_tolerance=settings.default_tolerance,
        max_tolerance_miles=settings.max_tolerance_miles,
    )
    # CPU-bound pass over the whole snapshot; keep it off the event loop
    results = await run_in_threadpool(engine.search, query, snapshot.places, limit)
    logger.debug(
        "Search from %s: %s %s ±%s -> %d results",
        origin.name,
        query.target_distance,
        query.unit.value,
        query.tolerance,
        len(results),
    )

    return NearbyPlacesResponse(
        origin=ResolvedPlaceResponse.from_domain(origin),
        target_distance=query.target_distance,
        tolerance=query.tolerance,
        unit=query.unit.value,
        count=len(results),
        results=[PlaceResultResponse.from_domain(r) for r in results],
    )


@router.get(
    "/near",
    response_model=NearbyPlacesResponse,
    summary="Places approximately a given distance from an origin",
    description=(
        "Resolves *origin*, then returns dataset places whose great-circle "
        "distance lies within ``distance ± tolerance``, closest to the exact "
        "distance first.  Tolerance is clamped to 50 miles (or the km "
        "equivalent)."
    ),
)
@limiter.limit(rate_limit)
async def places_near(
    request: Request,
    origin: str = Query(..., min_length=1, max_length=200),
    distance: float = Query(..., ge=0),
    tolerance: Optional[float] = Query(None, ge=0),
    unit: DistanceUnit = Query(DistanceUnit(settings.default_unit)),
    limit: Optional[int] = Query(None, ge=1, le=settings.result_cap),
    snapshot: PlaceSnapshot = Depends(get_places),
    geocoder: Geocoder = Depends(get_geocoder),
    engine: ProximitySearchEngine = Depends(get_engine),
):
    return await _search(
        origin, distance, tolerance, unit, limit, snapshot, geocoder, engine
    )


@router.get(
    "/exactly/{distance}/from/{slug}",
    response_model=NearbyPlacesResponse,
    summary="Places exactly N miles from a slugged origin",
)
@limiter.limit(rate_limit)
async def places_exactly_miles_from(
    request: Request,
    distance: float,
    slug: str,
    tolerance: Optional[float] = Query(None, ge=0),
    snapshot: PlaceSnapshot = Depends(get_places),
    geocoder: Geocoder = Depends(get_geocoder),
    engine: ProximitySearchEngine = Depends(get_engine),
):
    return await _search(
        slug_to_display(slug),
        distance,
        tolerance,
        DistanceUnit.MI,
        None,
        snapshot,
        geocoder,
        engine,
    )
