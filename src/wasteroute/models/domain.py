"""Domain models for collection zones and route candidates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


@dataclass(slots=True)
class Zone:
    """Mutable simulation state for one collection zone.

    Owned by ``ZoneRegistry``; nothing else should write to it.
    """

    id: str
    name: str
    lat: float
    lon: float
    bin_capacity: float
    generation_rate: float
    current_fill: float
    last_collection_time: datetime
    last_update: datetime


@dataclass(frozen=True, slots=True)
class ZoneSnapshot:
    """Read-only view of a zone with derived fields computed at read time."""

    id: str
    name: str
    lat: float
    lon: float
    bin_capacity: float
    generation_rate: float
    current_fill: float
    last_collection_time: datetime
    fill_percentage: float
    predicted_overflow_minutes: float
    risk_level: RiskLevel
    hotspot_score: float

    @property
    def is_signal(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class SignalPoint:
    """A household that explicitly asked for pickup.

    Signals always report a full bin with no time left before overflow.
    """

    id: str
    source_id: str
    name: str
    lat: float
    lon: float
    ward_number: Optional[int] = None
    waste_types: tuple[str, ...] = field(default_factory=tuple)
    fill_percentage: float = 100.0
    predicted_overflow_minutes: float = 0.0
    risk_level: RiskLevel = RiskLevel.CRITICAL

    @property
    def is_signal(self) -> bool:
        return True


Candidate = Union[ZoneSnapshot, SignalPoint]
