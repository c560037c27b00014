"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ...models.domain import Candidate


@dataclass(slots=True)
class RouteStop:
    candidate: Candidate
    sequence: int
    urgency: float
    score: float
    distance_from_previous_km: float
    estimated_time_min: int


@dataclass(slots=True)
class PriorityRoute:
    start_lat: float
    start_lon: float
    stops: List[RouteStop]
    total_distance_km: float
    estimated_total_time_min: int

    @property
    def signal_count(self) -> int:
        return sum(1 for stop in self.stops if stop.candidate.is_signal)


@dataclass(slots=True)
class RoadGeometry:
    """Street-following path returned by OSRM for an ordered route."""

    coordinates: List[tuple[float, float]]
    distance_km: float
    duration_min: float
    waypoints: list = field(default_factory=list)
    source: Optional[str] = "osrm"
