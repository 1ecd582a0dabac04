"""
Distance endpoints
==================

GET /api/v1/distance                    -- how far is *destination* from *source*
GET /api/v1/distance/how-far-is/{slug}  -- same, from ``<source>-from-<destination>``
GET /api/v1/distance/from-me            -- how far is *destination* from a lat/lon
GET /api/v1/distance/from-me/{slug}     -- same, destination given as a slug
"""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from locatemycity.api.dependencies import get_geocoder, get_travel_estimator
from locatemycity.api.middleware import limiter, rate_limit
from locatemycity.api.schemas import DistanceResponse
from locatemycity.domain.entities import Coordinate, ResolvedPlace
from locatemycity.domain.geodesy import slug_to_display
from locatemycity.domain.travel import TravelEstimator
from locatemycity.infrastructure.geocoder import Geocoder

router = APIRouter(prefix="/distance", tags=["distance"])

_SLUG_PREFIX = "how-far-is-"
_SLUG_SEPARATOR = "-from-"
_FROM_ME_SUFFIX = "-from-me"


def _require(place: ResolvedPlace | None, text: str) -> ResolvedPlace:
    if place is None:
        raise HTTPException(status_code=404, detail=f"Could not resolve {text!r}")
    return place


def _strip_prefix(slug: str) -> str:
    return slug[len(_SLUG_PREFIX):] if slug.startswith(_SLUG_PREFIX) else slug


def split_route_slug(slug: str) -> tuple[str, str]:
    """
    ``"how-far-is-los-angeles-from-san-diego"`` -> ``("Los Angeles", "San Diego")``.

    The ``how-far-is-`` prefix is optional.  The slug is split at the first
    ``-from-``; a slug without one, or with an empty side, is a 422.
    """
    source, sep, destination = _strip_prefix(slug).partition(_SLUG_SEPARATOR)
    source = slug_to_display(source).strip()
    destination = slug_to_display(destination).strip()
    if not sep or not source or not destination:
        raise HTTPException(
            status_code=422,
            detail=f"Slug {slug!r} must look like '<source>-from-<destination>'",
        )
    return source, destination


def destination_from_slug(slug: str) -> str:
    """``"how-far-is-fresno-from-me"`` -> ``"Fresno"``; both affixes optional."""
    body = _strip_prefix(slug)
    if body.endswith(_FROM_ME_SUFFIX):
        body = body[: -len(_FROM_ME_SUFFIX)]
    destination = slug_to_display(body).strip()
    if not destination:
        raise HTTPException(status_code=422, detail=f"Slug {slug!r} names no destination")
    return destination


async def _between(
    source: str, destination: str, geocoder: Geocoder, estimator: TravelEstimator
) -> DistanceResponse:
    src, dst = await asyncio.gather(
        geocoder.resolve(source), geocoder.resolve(destination)
    )
    src = _require(src, source)
    dst = _require(dst, destination)
    summary = estimator.summarize(src.coordinate, dst.coordinate)
    return DistanceResponse.from_domain(src, dst, summary)


async def _from_point(
    lat: float,
    lon: float,
    destination: str,
    geocoder: Geocoder,
    estimator: TravelEstimator,
) -> DistanceResponse:
    here = ResolvedPlace(name="Your location", coordinate=Coordinate(lat, lon))
    dst = _require(await geocoder.resolve(destination), destination)
    summary = estimator.summarize(here.coordinate, dst.coordinate)
    return DistanceResponse.from_domain(here, dst, summary)


@router.get(
    "",
    response_model=DistanceResponse,
    summary="Distance and travel times between two places",
)
@limiter.limit(rate_limit)
async def distance_between(
    request: Request,
    source: str = Query(..., min_length=1, max_length=200),
    destination: str = Query(..., min_length=1, max_length=200),
    geocoder: Geocoder = Depends(get_geocoder),
    estimator: TravelEstimator = Depends(get_travel_estimator),
):
    return await _between(source, destination, geocoder, estimator)


@router.get(
    "/how-far-is/{slug}",
    response_model=DistanceResponse,
    summary="Distance between two places named by a route slug",
)
@limiter.limit(rate_limit)
async def distance_between_slug(
    request: Request,
    slug: str,
    geocoder: Geocoder = Depends(get_geocoder),
    estimator: TravelEstimator = Depends(get_travel_estimator),
):
    source, destination = split_route_slug(slug)
    return await _between(source, destination, geocoder, estimator)


@router.get(
    "/from-me",
    response_model=DistanceResponse,
    summary="Distance and travel times from the caller's coordinate",
)
@limiter.limit(rate_limit)
async def distance_from_me(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    destination: str = Query(..., min_length=1, max_length=200),
    geocoder: Geocoder = Depends(get_geocoder),
    estimator: TravelEstimator = Depends(get_travel_estimator),
):
    return await _from_point(lat, lon, destination, geocoder, estimator)


@router.get(
    "/from-me/{slug}",
    response_model=DistanceResponse,
    summary="Distance from the caller's coordinate to a place named by slug",
)
@limiter.limit(rate_limit)
async def distance_from_me_slug(
    request: Request,
    slug: str,
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    geocoder: Geocoder = Depends(get_geocoder),
    estimator: TravelEstimator = Depends(get_travel_estimator),
):
    return await _from_point(lat, lon, destination_from_slug(slug), geocoder, estimator)
