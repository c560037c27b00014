"""Serialize zones, signals and routes into API response models."""

from __future__ import annotations

import math
from datetime import datetime
from typing import Iterable, Optional

from ...models.domain import SignalPoint, ZoneSnapshot
from ...schemas.routing import RouteResponse, RouteStopModel
from ...schemas.zones import SignalModel, ZoneStateModel
from ..routing.models import PriorityRoute, RoadGeometry


def _overflow_minutes(value: float) -> Optional[int]:
    return None if math.isinf(value) else round(value)


def zone_to_model(zone: ZoneSnapshot) -> ZoneStateModel:
    return ZoneStateModel(
        id=zone.id,
        name=zone.name,
        lat=zone.lat,
        lon=zone.lon,
        bin_capacity=zone.bin_capacity,
        generation_rate=zone.generation_rate,
        current_fill=zone.current_fill,
        last_collection_time=zone.last_collection_time,
        fill_percentage=round(zone.fill_percentage, 1),
        risk_level=zone.risk_level,
        hotspot_score=zone.hotspot_score,
        predicted_overflow_minutes=_overflow_minutes(zone.predicted_overflow_minutes),
    )


def signal_to_model(signal: SignalPoint) -> SignalModel:
    return SignalModel(
        id=signal.id,
        source_id=signal.source_id,
        name=signal.name,
        lat=signal.lat,
        lon=signal.lon,
        fill_percentage=signal.fill_percentage,
        risk_level=signal.risk_level,
        predicted_overflow_minutes=round(signal.predicted_overflow_minutes),
        ward_number=signal.ward_number,
        waste_types=list(signal.waste_types),
    )


def _stop_model(stop) -> RouteStopModel:
    candidate = stop.candidate
    is_signal = isinstance(candidate, SignalPoint)
    return RouteStopModel(
        id=candidate.id,
        name=candidate.name,
        lat=candidate.lat,
        lon=candidate.lon,
        sequence=stop.sequence,
        is_signal=is_signal,
        fill_percentage=round(candidate.fill_percentage, 1),
        risk_level=candidate.risk_level,
        predicted_overflow_minutes=_overflow_minutes(candidate.predicted_overflow_minutes),
        urgency=round(stop.urgency, 4),
        distance_from_previous=stop.distance_from_previous_km,
        estimated_time=stop.estimated_time_min,
        ward_number=candidate.ward_number if is_signal else None,
        waste_types=list(candidate.waste_types) if is_signal else [],
    )


def straight_line_path(route: PriorityRoute) -> list[list[float]]:
    path = [[route.start_lat, route.start_lon]]
    path.extend([stop.candidate.lat, stop.candidate.lon] for stop in route.stops)
    return path


def route_to_response(
    route: PriorityRoute,
    *,
    timestamp: datetime,
    hotspot_ids: Iterable[str] = (),
    road_geometry: Optional[RoadGeometry] = None,
    metadata: Optional[dict] = None,
) -> RouteResponse:
    hotspot_set = set(hotspot_ids)
    overlays: dict = {"straight_line": straight_line_path(route)}
    if road_geometry is not None:
        overlays["road"] = {
            "coordinates": [list(point) for point in road_geometry.coordinates],
            "distance_km": round(road_geometry.distance_km, 2),
            "duration_min": round(road_geometry.duration_min, 1),
            "source": road_geometry.source,
        }
    return RouteResponse(
        route=[_stop_model(stop) for stop in route.stops],
        total_distance=round(route.total_distance_km, 1),
        estimated_total_time=route.estimated_total_time_min,
        hotspot_count=len(hotspot_set),
        signal_count=route.signal_count,
        timestamp=timestamp,
        metadata={**(metadata or {}), "map_overlays": overlays},
    )
