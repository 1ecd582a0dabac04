"""
Geodesy utilities: great-circle distance, unit conversion, slugs.

All functions are pure.  Distances use the Haversine formula on a sphere
of radius ``EARTH_RADIUS_KM`` unless the caller passes its own radius
(the service passes ``settings.earth_radius_km``).

Longitude wrap-around at the antimeridian needs no special case: the
``sin²(dLon/2)`` term is periodic, so a 359° difference behaves like 1°.

Complexity: O(1) per call.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING
from urllib.parse import unquote

from .enums import MILES_PER_KM, NAUTICAL_MILES_PER_KM

if TYPE_CHECKING:
    from .entities import Coordinate

EARTH_RADIUS_KM = 6_371.0

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def degrees_to_radians(degrees: float) -> float:
    return degrees * math.pi / 180


def haversine_km(
    a: Coordinate, b: Coordinate, radius_km: float = EARTH_RADIUS_KM
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r = degrees_to_radians(a.latitude)
    lat2_r = degrees_to_radians(b.latitude)
    dlat = degrees_to_radians(b.latitude - a.latitude)
    dlng = degrees_to_radians(b.longitude - a.longitude)

    h = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    # rounding can push h a hair past 1 for antipodal points
    h = min(1.0, h)
    return 2 * radius_km * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def km_to_miles(km: float) -> float:
    return km * MILES_PER_KM


def miles_to_km(miles: float) -> float:
    return miles / MILES_PER_KM


def km_to_nautical_miles(km: float) -> float:
    return km * NAUTICAL_MILES_PER_KM


# ── Display names ─────────────────────────────────────────────────────


def slugify(text: str) -> str:
    """
    ``"São Paulo, Brazil!"`` -> ``"s-o-paulo-brazil"``.

    Only ASCII letters and digits survive; every other run of characters
    (accented letters included) collapses to one hyphen.  Idempotent.
    """
    return _NON_ALNUM.sub("-", text.lower()).strip("-")


def title_case(text: str) -> str:
    """Capitalise each space-separated word; the spacing itself is kept."""
    return " ".join(w[:1].upper() + w[1:].lower() for w in text.split(" "))


def slug_to_display(slug: str) -> str:
    """``"anaheim-ca"`` -> ``"Anaheim Ca"``; URL escapes are decoded first."""
    return title_case(unquote(slug).replace("-", " "))
