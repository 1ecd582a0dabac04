"""Domain enumerations."""

import enum

MILES_PER_KM = 0.621371
NAUTICAL_MILES_PER_KM = 0.539957


class DistanceUnit(str, enum.Enum):
    KM = "km"
    MI = "mi"

    def to_km(self, value: float) -> float:
        if self is DistanceUnit.MI:
            return value / MILES_PER_KM
        return value

    def from_km(self, km: float) -> float:
        if self is DistanceUnit.MI:
            return km * MILES_PER_KM
        return km


class TravelMode(str, enum.Enum):
    DRIVING = "driving"
    FLYING = "flying"
    WALKING = "walking"
