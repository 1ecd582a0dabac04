"""
Shared test fixtures.

The API is exercised through ``httpx.ASGITransport`` without running the
lifespan, so no dataset file or network geocoder is needed: the fixtures
put an in-memory place snapshot and a dictionary-backed geocoder on
``app.state`` instead.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from locatemycity.domain.entities import Coordinate, Place, ResolvedPlace
from locatemycity.infrastructure.dataset import PlaceSnapshot, snapshot_from_places
from locatemycity.infrastructure.geocoder import GeocodingError


# ── Reference coordinates ─────────────────────────────────────────────

LOS_ANGELES = Coordinate(34.0522, -118.2437)
SAN_DIEGO = Coordinate(32.7157, -117.1611)  # ~179 km from LA
SANTA_BARBARA = Coordinate(34.4208, -119.6982)  # ~140 km from LA
FRESNO = Coordinate(36.7378, -119.7871)  # ~330 km from LA
LAS_VEGAS = Coordinate(36.1699, -115.1398)  # ~368 km from LA
SAN_FRANCISCO = Coordinate(37.7749, -122.4194)  # ~559 km from LA


def make_place(name: str, coord: Coordinate, region: str = "California") -> Place:
    return Place(name=name, coordinate=coord, admin_region=region, country="US")


@pytest.fixture
def california_places() -> list[Place]:
    return [
        make_place("Los Angeles", LOS_ANGELES),
        make_place("San Diego", SAN_DIEGO),
        make_place("Santa Barbara", SANTA_BARBARA),
        make_place("Fresno", FRESNO),
        make_place("Las Vegas", LAS_VEGAS, region="Nevada"),
        make_place("San Francisco", SAN_FRANCISCO),
    ]


# ── Fake geocoder ─────────────────────────────────────────────────────


class FakeGeocoder:
    """Resolves names from a fixed table; records every query."""

    def __init__(self, table: dict[str, Coordinate], fail: bool = False):
        self.table = {k.lower(): v for k, v in table.items()}
        self.fail = fail
        self.calls: list[str] = []

    async def resolve(self, query: str) -> Optional[ResolvedPlace]:
        self.calls.append(query)
        if self.fail:
            raise GeocodingError("upstream down")
        coord = self.table.get(query.strip().lower())
        if coord is None:
            return None
        return ResolvedPlace(name=query.strip().title(), coordinate=coord)


@pytest.fixture
def geocoder() -> FakeGeocoder:
    return FakeGeocoder(
        {
            "los angeles": LOS_ANGELES,
            "san diego": SAN_DIEGO,
            "fresno": FRESNO,
        }
    )


@pytest.fixture
def snapshot(california_places) -> PlaceSnapshot:
    return snapshot_from_places(california_places, source="test")


# ── API client ────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def client(snapshot, geocoder) -> AsyncGenerator[AsyncClient, None]:
    from locatemycity.api.app import create_app

    app = create_app()
    app.state.snapshot = snapshot
    app.state.geocoder = geocoder

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
