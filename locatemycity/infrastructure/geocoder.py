"""
Origin resolver backed by OpenStreetMap Nominatim.

Free text ("anaheim ca") -> ``ResolvedPlace``.  Only the first hit is
used.  No hits is a normal outcome (``None``); HTTP and transport
failures raise ``GeocodingError`` so the API can answer 502 instead of
pretending nothing was found.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

import httpx

from locatemycity.domain.entities import Coordinate, InvalidCoordinate, ResolvedPlace

logger = logging.getLogger(__name__)


class GeocodingError(Exception):
    """Raised when the upstream geocoder cannot be reached or misbehaves."""


class Geocoder(Protocol):
    async def resolve(self, query: str) -> Optional[ResolvedPlace]: ...


class NominatimGeocoder:
    def __init__(
        self,
        base_url: str = "https://nominatim.openstreetmap.org/search",
        user_agent: str = "LocateMyCity/1.0",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent, "Accept-Language": "en"},
        )

    async def resolve(self, query: str) -> Optional[ResolvedPlace]:
        query = query.strip()
        if not query:
            return None

        try:
            resp = await self.client.get(
                self.base_url,
                params={"q": query, "format": "json", "limit": 1},
            )
            resp.raise_for_status()
            hits = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Geocoding %r failed: %s", query, exc)
            raise GeocodingError(f"Geocoder unavailable for {query!r}") from exc

        if not isinstance(hits, list) or not hits:
            logger.info("Geocoding %r: no match", query)
            return None

        hit = hits[0]
        try:
            coordinate = Coordinate(float(hit["lat"]), float(hit["lon"]))
        except (KeyError, TypeError, ValueError, InvalidCoordinate) as exc:
            raise GeocodingError(f"Malformed geocoder hit for {query!r}") from exc

        display_name = str(hit.get("display_name") or "")
        name = display_name.split(",")[0].strip() or query
        return ResolvedPlace(name=name, coordinate=coordinate)

    async def aclose(self) -> None:
        await self.client.aclose()
