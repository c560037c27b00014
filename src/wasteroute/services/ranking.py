"""Urgency and hotspot scoring for zones and signals.

Two separate scores live here. ``urgency`` feeds the route optimizer and is
bounded to ``[0, 1]`` for zones; signals get ``SIGNAL_URGENCY`` so they sort
ahead of every zone. ``hotspot_score`` is an unbounded dashboard metric and is
never used for routing.
"""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from ..config import settings
from ..models.domain import Candidate, RiskLevel, SignalPoint, ZoneSnapshot

FILL_WEIGHT = 0.7
OVERFLOW_WEIGHT = 0.3
OVERFLOW_HORIZON_MINUTES = 1440.0
SIGNAL_URGENCY = 2.0


def risk_level(fill_percentage: float, thresholds: Sequence[float] | None = None) -> RiskLevel:
    medium, high, critical = thresholds or settings.risk_thresholds
    if fill_percentage < medium:
        return RiskLevel.LOW
    if fill_percentage < high:
        return RiskLevel.MEDIUM
    if fill_percentage < critical:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


def hotspot_score(fill_percentage: float, minutes_since_collection: float) -> float:
    """Display score: grows with fill and with time since the last full collection."""

    return max(0.0, fill_percentage) * max(0.0, minutes_since_collection)


def predicted_overflow_minutes(bin_capacity: float, current_fill: float, generation_rate: float) -> float:
    if generation_rate <= 1e-9:
        return math.inf
    return max(0.0, bin_capacity - current_fill) / generation_rate


def urgency(candidate: Candidate) -> float:
    match candidate:
        case SignalPoint():
            return SIGNAL_URGENCY
        case ZoneSnapshot(fill_percentage=fill, predicted_overflow_minutes=overflow):
            # Over-capacity readings count as full so zone urgency stays <= 1.0.
            fill_term = min(max(fill, 0.0), 100.0) / 100
            horizon = min(overflow, OVERFLOW_HORIZON_MINUTES) / OVERFLOW_HORIZON_MINUTES
            return fill_term * FILL_WEIGHT + (1 - horizon) * OVERFLOW_WEIGHT
        case _:
            raise TypeError(f"Unsupported candidate type: {type(candidate).__name__}")


def rank_hotspots(snapshots: Iterable[ZoneSnapshot], limit: int) -> list[ZoneSnapshot]:
    """Top ``limit`` zones by hotspot score; ties go to the smaller zone id."""

    ordered = sorted(snapshots, key=lambda zone: (-zone.hotspot_score, zone.id))
    return ordered[: max(0, limit)]
