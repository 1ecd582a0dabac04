"""
Point-to-point distance summary ("how far is X from Y").

Formula
-------
Hours = Distance_km / Speed_kmh, per travel mode.

* Driving: 80 km/h   * Flying: 800 km/h   * Walking: 5 km/h

Speeds are flat averages, not routed estimates: flying ignores taxi and
boarding, driving ignores the road network.

Complexity: O(1) per summary.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .entities import Coordinate, InvalidQueryParameter
from .enums import TravelMode
from .geodesy import EARTH_RADIUS_KM, haversine_km, km_to_miles, km_to_nautical_miles

DEFAULT_SPEEDS_KMH: dict[TravelMode, float] = {
    TravelMode.DRIVING: 80.0,
    TravelMode.FLYING: 800.0,
    TravelMode.WALKING: 5.0,
}


def estimate_travel_hours(distance_km: float, speed_kmh: float) -> float:
    if speed_kmh <= 0:
        raise InvalidQueryParameter(f"speed must be > 0, got {speed_kmh}")
    return distance_km / speed_kmh


@dataclass(frozen=True)
class DistanceSummary:
    distance_km: float
    distance_miles: float
    distance_nautical_miles: float
    travel_hours: dict[TravelMode, float] = field(default_factory=dict)


class TravelEstimator:
    """High-level API used by the distance routes."""

    def __init__(
        self,
        speeds_kmh: dict[TravelMode, float] | None = None,
        earth_radius_km: float = EARTH_RADIUS_KM,
    ):
        self.speeds_kmh = dict(DEFAULT_SPEEDS_KMH if speeds_kmh is None else speeds_kmh)
        for mode, speed in self.speeds_kmh.items():
            if speed <= 0:
                raise InvalidQueryParameter(f"{mode.value} speed must be > 0")
        self.earth_radius_km = earth_radius_km

    def summarize(self, a: Coordinate, b: Coordinate) -> DistanceSummary:
        km = haversine_km(a, b, self.earth_radius_km)
        return DistanceSummary(
            distance_km=km,
            distance_miles=km_to_miles(km),
            distance_nautical_miles=km_to_nautical_miles(km),
            travel_hours={
                mode: estimate_travel_hours(km, speed)
                for mode, speed in self.speeds_kmh.items()
            },
        )


def summarize_distance(
    a: Coordinate,
    b: Coordinate,
    speeds_kmh: dict[TravelMode, float] | None = None,
) -> DistanceSummary:
    return TravelEstimator(speeds_kmh).summarize(a, b)
