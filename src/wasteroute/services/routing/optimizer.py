"""Greedy priority-aware stop ordering.

A weighted nearest-neighbour walk: from the current position, pick the
remaining candidate with the best blend of urgency and proximity, move there,
repeat. It is a heuristic, not a TSP solver.

Signals carry urgency 2.0, so their weighted urgency alone (1.2) beats the
best any zone can reach (0.6 + 0.4). Every signal is therefore visited before
the first zone, however far away it is.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ...models.domain import Candidate
from ..geospatial import haversine_km
from ..ranking import urgency
from .models import PriorityRoute, RouteStop

URGENCY_WEIGHT = 0.6
PROXIMITY_WEIGHT = 0.4
# 24 km/h average speed
MINUTES_PER_KM = 2.5


def proximity_score(distance_km: float) -> float:
    return 1 / (1 + distance_km)


def selection_score(candidate_urgency: float, distance_km: float) -> float:
    return candidate_urgency * URGENCY_WEIGHT + proximity_score(distance_km) * PROXIMITY_WEIGHT


def estimate_minutes(distance_km: float) -> int:
    return round(distance_km * MINUTES_PER_KM)


def optimize_route(start_lat: float, start_lon: float, candidates: Sequence[Candidate]) -> PriorityRoute:
    """Order ``candidates`` into a visitation route starting at the worker."""

    urgencies = {candidate.id: urgency(candidate) for candidate in candidates}
    remaining = list(candidates)
    current_lat, current_lon = start_lat, start_lon
    stops: list[RouteStop] = []
    total_distance = 0.0

    while remaining:
        best: Optional[Candidate] = None
        best_score = -math.inf
        best_distance = math.inf

        for candidate in remaining:
            distance = haversine_km(current_lat, current_lon, candidate.lat, candidate.lon)
            score = selection_score(urgencies[candidate.id], distance)
            if (
                score > best_score
                or (score == best_score and distance < best_distance)
                or (score == best_score and distance == best_distance and best is not None and candidate.id < best.id)
            ):
                best, best_score, best_distance = candidate, score, distance

        remaining.remove(best)
        total_distance += best_distance
        stops.append(
            RouteStop(
                candidate=best,
                sequence=len(stops) + 1,
                urgency=urgencies[best.id],
                score=best_score,
                distance_from_previous_km=best_distance,
                estimated_time_min=estimate_minutes(best_distance),
            )
        )
        current_lat, current_lon = best.lat, best.lon

    return PriorityRoute(
        start_lat=start_lat,
        start_lon=start_lon,
        stops=stops,
        total_distance_km=total_distance,
        estimated_total_time_min=estimate_minutes(total_distance),
    )
