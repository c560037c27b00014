"""In-memory zone registry and simulation clock."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional, Sequence

from ..config import settings
from ..models.domain import Zone, ZoneSnapshot
from .ranking import hotspot_score, predicted_overflow_minutes, rank_hotspots, risk_level

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ZoneRegistry:
    """Authoritative set of zones for one process.

    Fill only moves through ``tick`` (accumulation) and ``collect`` (removal).
    Both run under one lock, so a tick can never overwrite a collection on the
    same zone or the other way round. Construct one per app and inject it.
    """

    def __init__(
        self,
        zones: Iterable[Zone],
        *,
        overflow_allowance: Optional[float] = None,
        risk_thresholds: Optional[Sequence[float]] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._zones: dict[str, Zone] = {}
        for zone in zones:
            if zone.id in self._zones:
                raise ValueError(f"Duplicate zone id '{zone.id}'.")
            if zone.bin_capacity <= 0:
                raise ValueError(f"Zone '{zone.id}' must have a positive bin capacity.")
            self._zones[zone.id] = zone
        self.overflow_allowance = overflow_allowance or settings.overflow_allowance
        if self.overflow_allowance < 1:
            raise ValueError("overflow_allowance must be at least 1.0.")
        self.risk_thresholds = tuple(risk_thresholds or settings.risk_thresholds)
        self._clock = clock or utcnow
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._zones)

    def __contains__(self, zone_id: object) -> bool:
        return zone_id in self._zones

    def now(self) -> datetime:
        return self._clock()

    def tick(self, now: Optional[datetime] = None) -> None:
        """Advance every zone's fill to ``now``.

        Elapsed time is measured per zone from its last update, so calling this
        twice with the same timestamp leaves the fill untouched. A timestamp
        earlier than the last update is ignored rather than rewinding state.
        """

        now = now or self.now()
        with self._lock:
            for zone in self._zones.values():
                elapsed_minutes = (now - zone.last_update).total_seconds() / 60
                if elapsed_minutes <= 0:
                    continue
                ceiling = zone.bin_capacity * self.overflow_allowance
                grown = zone.current_fill + zone.generation_rate * elapsed_minutes
                zone.current_fill = min(ceiling, max(0.0, grown))
                zone.last_update = now

    def collect(self, zone_id: str, amount: float, now: Optional[datetime] = None) -> Optional[ZoneSnapshot]:
        """Remove ``amount`` kg from a zone.

        Returns the post-collection snapshot, or ``None`` when the zone is
        unknown. Emptying the bin counts as a full collection and stamps
        ``last_collection_time``; a partial pickup only lowers the fill.
        """

        if amount < 0:
            raise ValueError("Collected amount cannot be negative.")
        now = now or self.now()
        with self._lock:
            zone = self._zones.get(zone_id)
            if zone is None:
                logger.warning("Collection requested for unknown zone '%s'", zone_id)
                return None
            if amount >= zone.current_fill:
                zone.current_fill = 0.0
                zone.last_collection_time = now
                logger.info("Full collection at zone %s", zone_id)
            else:
                zone.current_fill -= amount
                logger.info("Partial collection of %.1fkg at zone %s", amount, zone_id)
            return self._snapshot(zone, now)

    def get_zone(self, zone_id: str, now: Optional[datetime] = None) -> Optional[ZoneSnapshot]:
        now = now or self.now()
        with self._lock:
            zone = self._zones.get(zone_id)
            return self._snapshot(zone, now) if zone else None

    def get_zones(self, now: Optional[datetime] = None) -> list[ZoneSnapshot]:
        now = now or self.now()
        with self._lock:
            return [self._snapshot(zone, now) for zone in self._zones.values()]

    def get_hotspots(self, n: int, now: Optional[datetime] = None) -> list[ZoneSnapshot]:
        return rank_hotspots(self.get_zones(now), n)

    def _snapshot(self, zone: Zone, now: datetime) -> ZoneSnapshot:
        fill_percentage = zone.current_fill * 100 / zone.bin_capacity
        fill_percentage = min(max(fill_percentage, 0.0), self.overflow_allowance * 100)
        minutes_since_collection = max(0.0, (now - zone.last_collection_time).total_seconds() / 60)
        return ZoneSnapshot(
            id=zone.id,
            name=zone.name,
            lat=zone.lat,
            lon=zone.lon,
            bin_capacity=zone.bin_capacity,
            generation_rate=zone.generation_rate,
            current_fill=zone.current_fill,
            last_collection_time=zone.last_collection_time,
            fill_percentage=fill_percentage,
            predicted_overflow_minutes=predicted_overflow_minutes(
                zone.bin_capacity, zone.current_fill, zone.generation_rate
            ),
            risk_level=risk_level(fill_percentage, self.risk_thresholds),
            hotspot_score=hotspot_score(fill_percentage, minutes_since_collection),
        )
