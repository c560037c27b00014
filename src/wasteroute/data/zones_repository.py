"""Seed data for the simulated collection zones."""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Iterable, Optional

from ..config import settings
from ..models.domain import Zone

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ZoneSeed:
    id: str
    name: str
    lat: float
    lon: float
    bin_capacity: float
    generation_rate: float
    current_fill: Optional[float] = None


# Piravom municipality collection points, snapped to OpenStreetMap road nodes.
DEFAULT_ZONE_SEEDS: tuple[ZoneSeed, ...] = (
    ZoneSeed("zone_001", "Piravom Central Bus Stand", 9.8640844, 76.513132, 800, 0.148),
    ZoneSeed("zone_002", "Kalampoor Junction", 9.8668764, 76.5065807, 750, 0.138),
    ZoneSeed("zone_003", "Pazhoor Temple Road", 9.868886, 76.5021146, 900, 0.167),
    ZoneSeed("zone_004", "Kakkad South Market", 9.8716402, 76.4974814, 700, 0.130),
    ZoneSeed("zone_005", "Mulakulam Border", 9.8742306, 76.4943236, 650, 0.120),
    ZoneSeed("zone_006", "Maneed Panchayat Office", 9.8733934, 76.4878778, 600, 0.111),
    ZoneSeed("zone_007", "Pampakuda Main Junction", 9.8780133, 76.484395, 850, 0.157),
    ZoneSeed("zone_008", "Namakuzhy High School", 9.8804917, 76.4809567, 500, 0.093),
    ZoneSeed("zone_009", "Veliyanad Center", 9.8832796, 76.4769612, 700, 0.130),
    ZoneSeed("zone_010", "Kochupilly Road", 9.8840637, 76.4729282, 450, 0.083),
    ZoneSeed("zone_011", "Peppathy Junction", 9.8838035, 76.4688321, 480, 0.089),
    ZoneSeed("zone_012", "Government Hospital Piravom", 9.8627133, 76.5261783, 550, 0.102),
)


def _seed_from_row(row: dict[str, Any]) -> ZoneSeed:
    current_fill = row.get("current_fill")
    return ZoneSeed(
        id=str(row["id"]).strip(),
        name=str(row.get("name") or row["id"]).strip(),
        lat=float(row["lat"]),
        lon=float(row["lon"]),
        bin_capacity=float(row["bin_capacity"]),
        generation_rate=float(row["generation_rate"]),
        current_fill=float(current_fill) if current_fill is not None else None,
    )


def load_zone_seeds(source: Optional[Path] = None) -> tuple[ZoneSeed, ...]:
    """Load zone seeds from a JSON file, or fall back to the built-in set."""

    json_path = source or settings.zone_seed_file
    if json_path is None:
        return DEFAULT_ZONE_SEEDS
    if not json_path.exists():
        raise FileNotFoundError(f"Zone seed file not found: {json_path}")

    with json_path.open("r", encoding="utf-8") as handle:
        rows = json.load(handle)
    if not isinstance(rows, list):
        raise ValueError(f"Zone seed file '{json_path}' must contain a JSON array.")

    try:
        seeds = tuple(_seed_from_row(row) for row in rows)
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Invalid zone seed row in '{json_path}': {exc}") from exc
    logger.info("Loaded %d zone seeds from %s", len(seeds), json_path)
    return seeds


def build_zones(
    seeds: Iterable[ZoneSeed],
    now: datetime,
    *,
    rng: Optional[random.Random] = None,
    initial_fill_fraction: Optional[float] = None,
    collection_age_minutes: Optional[float] = None,
) -> list[Zone]:
    """Turn seeds into live zones with a randomised starting fill."""

    rng = rng or random.Random(settings.seed_random_state)
    fraction = settings.initial_fill_fraction if initial_fill_fraction is None else initial_fill_fraction
    age = settings.initial_collection_age_minutes if collection_age_minutes is None else collection_age_minutes
    last_collection = now - timedelta(minutes=age)

    zones: list[Zone] = []
    for seed in seeds:
        fill = seed.current_fill
        if fill is None:
            fill = rng.random() * seed.bin_capacity * fraction
        zones.append(
            Zone(
                id=seed.id,
                name=seed.name,
                lat=seed.lat,
                lon=seed.lon,
                bin_capacity=seed.bin_capacity,
                generation_rate=seed.generation_rate,
                current_fill=fill,
                last_collection_time=last_collection,
                last_update=now,
            )
        )
    return zones
