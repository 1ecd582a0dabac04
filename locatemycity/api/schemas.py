"""Pydantic response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from locatemycity.domain.entities import RankedResult, ResolvedPlace
from locatemycity.domain.travel import DistanceSummary


# ── Responses ─────────────────────────────────────────────────────────


class ResolvedPlaceResponse(BaseModel):
    name: str
    lat: float
    lon: float

    @classmethod
    def from_domain(cls, place: ResolvedPlace) -> ResolvedPlaceResponse:
        return cls(
            name=place.name,
            lat=place.coordinate.latitude,
            lon=place.coordinate.longitude,
        )


class PlaceResultResponse(BaseModel):
    name: str
    admin_region: Optional[str] = None
    country: Optional[str] = None
    label: str
    slug: str
    lat: float
    lon: float
    distance_km: float
    distance_miles: float
    deviation_km: float

    @classmethod
    def from_domain(cls, result: RankedResult) -> PlaceResultResponse:
        place = result.place
        return cls(
            name=place.name,
            admin_region=place.admin_region,
            country=place.country,
            label=place.label,
            slug=result.slug,
            lat=place.coordinate.latitude,
            lon=place.coordinate.longitude,
            distance_km=result.distance_km,
            distance_miles=result.distance_miles,
            deviation_km=result.deviation,
        )


class NearbyPlacesResponse(BaseModel):
    origin: ResolvedPlaceResponse
    target_distance: float
    tolerance: float
    unit: str
    count: int
    results: list[PlaceResultResponse] = []


class DistanceResponse(BaseModel):
    source: ResolvedPlaceResponse
    destination: ResolvedPlaceResponse
    distance_km: float
    distance_miles: float
    distance_nautical_miles: float
    travel_hours: dict[str, float]

    @classmethod
    def from_domain(
        cls,
        source: ResolvedPlace,
        destination: ResolvedPlace,
        summary: DistanceSummary,
    ) -> DistanceResponse:
        return cls(
            source=ResolvedPlaceResponse.from_domain(source),
            destination=ResolvedPlaceResponse.from_domain(destination),
            distance_km=round(summary.distance_km, 3),
            distance_miles=round(summary.distance_miles, 3),
            distance_nautical_miles=round(summary.distance_nautical_miles, 3),
            travel_hours={
                mode.value: round(hours, 1)
                for mode, hours in summary.travel_hours.items()
            },
        )


class DatasetStatusResponse(BaseModel):
    loaded: bool
    source: Optional[str] = None
    places: int = 0
    skipped: int = 0
    loaded_at: Optional[datetime] = None


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
