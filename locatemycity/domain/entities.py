"""
Domain value objects and errors.

Everything here is immutable: candidates are loaded once and shared by
concurrent requests, so no request may mutate a ``Place`` or a query.
``Coordinate`` refuses to exist in an invalid state, which lets the
geodesy functions assume their inputs are finite and in range.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .enums import DistanceUnit, MILES_PER_KM
from .geodesy import slugify


class InvalidCoordinate(Exception):
    """Raised when a latitude / longitude is non-finite or out of range."""


class InvalidQueryParameter(Exception):
    """Raised when a target distance, tolerance or speed is unusable."""


def validate_lat_lon(latitude: float, longitude: float) -> None:
    """Raise ``InvalidCoordinate`` unless both values are finite and in range."""
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidCoordinate(
            f"Coordinate must be finite, got ({latitude}, {longitude})"
        )
    if not -90.0 <= latitude <= 90.0:
        raise InvalidCoordinate(f"Latitude {latitude} outside [-90, 90]")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidCoordinate(f"Longitude {longitude} outside [-180, 180]")


def _require_non_negative(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidQueryParameter(f"{name} must be finite, got {value}")
    if value < 0:
        raise InvalidQueryParameter(f"{name} must be >= 0, got {value}")


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        validate_lat_lon(self.latitude, self.longitude)


@dataclass(frozen=True)
class Place:
    name: str
    coordinate: Coordinate
    admin_region: Optional[str] = None
    country: Optional[str] = None

    @property
    def label(self) -> str:
        """``"Name, Region, Country"`` with missing parts left out."""
        parts = [self.name, self.admin_region, self.country]
        return ", ".join(p for p in parts if p)


@dataclass(frozen=True)
class ResolvedPlace:
    """An origin or destination returned by the geocoder."""

    name: str
    coordinate: Coordinate


@dataclass(frozen=True)
class DistanceQuery:
    origin: Coordinate
    target_distance: float
    tolerance: float
    unit: DistanceUnit = DistanceUnit.MI

    def __post_init__(self) -> None:
        _require_non_negative("target_distance", self.target_distance)
        _require_non_negative("tolerance", self.tolerance)

    @classmethod
    def build(
        cls,
        origin: Coordinate,
        target_distance: float,
        tolerance: Optional[float] = None,
        unit: DistanceUnit = DistanceUnit.MI,
        *,
        default_tolerance: float = 5.0,
        max_tolerance_miles: float = 50.0,
    ) -> DistanceQuery:
        """
        Caller-side constructor: fills the default tolerance and clamps it
        to ``max_tolerance_miles`` expressed in *unit*.

        Negative or non-finite values are rejected, never clamped.
        """
        if tolerance is None:
            tolerance = default_tolerance
        _require_non_negative("target_distance", target_distance)
        _require_non_negative("tolerance", tolerance)

        if unit is DistanceUnit.MI:
            max_tolerance = max_tolerance_miles
        else:
            max_tolerance = max_tolerance_miles / MILES_PER_KM
        return cls(
            origin=origin,
            target_distance=target_distance,
            tolerance=min(tolerance, max_tolerance),
            unit=unit,
        )

    @property
    def target_km(self) -> float:
        return self.unit.to_km(self.target_distance)

    @property
    def tolerance_km(self) -> float:
        return self.unit.to_km(self.tolerance)


@dataclass(frozen=True)
class RankedResult:
    place: Place
    distance_km: float
    distance_miles: float
    deviation: float  # |distance_km - target_km|

    @property
    def slug(self) -> str:
        return slugify(self.place.name)
