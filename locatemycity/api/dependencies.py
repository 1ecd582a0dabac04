"""FastAPI dependency injection helpers."""

from fastapi import HTTPException, Request

from locatemycity.config import settings
from locatemycity.domain.enums import TravelMode
from locatemycity.domain.proximity import ProximitySearchEngine
from locatemycity.domain.travel import TravelEstimator
from locatemycity.infrastructure.dataset import PlaceSnapshot
from locatemycity.infrastructure.geocoder import Geocoder

_engine = ProximitySearchEngine(
    earth_radius_km=settings.earth_radius_km,
    result_cap=settings.result_cap,
)

_estimator = TravelEstimator(
    speeds_kmh={
        TravelMode.DRIVING: settings.driving_speed_kmh,
        TravelMode.FLYING: settings.flying_speed_kmh,
        TravelMode.WALKING: settings.walking_speed_kmh,
    },
    earth_radius_km=settings.earth_radius_km,
)


def get_engine() -> ProximitySearchEngine:
    return _engine


def get_travel_estimator() -> TravelEstimator:
    return _estimator


def get_places(request: Request) -> PlaceSnapshot:
    """The dataset snapshot loaded at startup; 503 until it is available."""
    snapshot = getattr(request.app.state, "snapshot", None)
    if snapshot is None:
        raise HTTPException(status_code=503, detail="Place dataset not loaded")
    return snapshot


def get_geocoder(request: Request) -> Geocoder:
    geocoder = getattr(request.app.state, "geocoder", None)
    if geocoder is None:
        raise HTTPException(status_code=503, detail="Geocoder not configured")
    return geocoder
