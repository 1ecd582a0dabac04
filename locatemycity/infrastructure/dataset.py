"""
Candidate dataset loader (GeoNames ``cities15000`` style JSON array).

Each record needs ``name``, ``lat`` and ``lon`` (or ``lng``); ``admin1``
(or ``region``) and ``country`` are optional.  Records without a name or
with a non-finite / out-of-range coordinate are skipped and counted.

A failed fetch or parse raises ``DatasetUnavailable``.  No placeholder
data is ever substituted.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

import httpx
from starlette.concurrency import run_in_threadpool

from locatemycity.config import Settings
from locatemycity.domain.entities import Coordinate, InvalidCoordinate, Place

logger = logging.getLogger(__name__)


class DatasetUnavailable(Exception):
    """Raised when the candidate dataset cannot be fetched or parsed."""


@dataclass(frozen=True)
class PlaceSnapshot:
    """Immutable set of candidates shared by every request."""

    places: tuple[Place, ...]
    source: str
    skipped: int = 0
    loaded_at: Optional[datetime] = None

    def __len__(self) -> int:
        return len(self.places)


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _first_present(record: dict, *keys: str) -> Any:
    """Value of the first key that holds something other than null or blank."""
    for key in keys:
        value = record.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None


def parse_record(record: Any) -> Optional[Place]:
    """Convert one raw record to a ``Place``; ``None`` means skip it."""
    if not isinstance(record, dict):
        return None
    name = _optional_str(record.get("name"))
    if not name:
        return None

    lat = _as_float(record.get("lat"))
    lon = _as_float(_first_present(record, "lon", "lng"))
    try:
        coordinate = Coordinate(lat, lon)
    except InvalidCoordinate:
        return None

    return Place(
        name=name,
        coordinate=coordinate,
        admin_region=_optional_str(_first_present(record, "admin1", "region")),
        country=_optional_str(record.get("country")),
    )


def parse_places(records: Any, source: str = "<memory>") -> PlaceSnapshot:
    if not isinstance(records, list):
        raise DatasetUnavailable(
            f"Dataset {source} must be a JSON array, got {type(records).__name__}"
        )

    places: list[Place] = []
    skipped = 0
    for record in records:
        place = parse_record(record)
        if place is None:
            skipped += 1
        else:
            places.append(place)

    logger.info(
        "Loaded %d places from %s (%d records skipped)", len(places), source, skipped
    )
    return PlaceSnapshot(
        places=tuple(places),
        source=source,
        skipped=skipped,
        loaded_at=datetime.now(timezone.utc),
    )


def load_places_from_file(path: str | Path) -> PlaceSnapshot:
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as fh:
            records = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise DatasetUnavailable(f"Could not read dataset {path}: {exc}") from exc
    return parse_places(records, source=str(path))


async def fetch_places(
    url: str,
    timeout: float = 30.0,
    client: httpx.AsyncClient | None = None,
) -> PlaceSnapshot:
    """Download the dataset over HTTP.  *client* is injectable for tests."""
    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=timeout)
    try:
        resp = await client.get(url)
        resp.raise_for_status()
        records = resp.json()
    except (httpx.HTTPError, json.JSONDecodeError) as exc:
        raise DatasetUnavailable(f"Could not fetch dataset {url}: {exc}") from exc
    finally:
        if owns_client:
            await client.aclose()
    return parse_places(records, source=url)


async def load_dataset(
    cfg: Settings, client: httpx.AsyncClient | None = None
) -> PlaceSnapshot:
    """
    Load from ``cfg.dataset_url`` when set, else from ``cfg.dataset_path``.

    The file read runs in the threadpool so startup never blocks the loop.
    """
    if cfg.dataset_url:
        return await fetch_places(
            cfg.dataset_url, timeout=cfg.dataset_timeout_seconds, client=client
        )
    return await run_in_threadpool(load_places_from_file, cfg.dataset_path)


def snapshot_from_places(places: Iterable[Place], source: str = "<memory>") -> PlaceSnapshot:
    return PlaceSnapshot(places=tuple(places), source=source)
