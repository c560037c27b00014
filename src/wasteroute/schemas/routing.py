"""Routing request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import RiskLevel


class RouteRequest(BaseModel):
    worker_lat: float = Field(..., ge=-90, le=90)
    worker_lng: float = Field(..., ge=-180, le=180)
    zone_ids: Optional[List[str]] = Field(
        default=None,
        description="Restrict the zones considered to these ids. Signals are not affected.",
    )
    include_signals: bool = Field(default=True, description="Merge ready-for-pickup households into the route.")
    include_road_geometry: bool = Field(
        default=False,
        description="Ask OSRM for the street-following path through the ordered stops.",
    )


class RouteStopModel(BaseModel):
    id: str
    name: str
    lat: float
    lon: float
    sequence: int
    is_signal: bool
    fill_percentage: float
    risk_level: RiskLevel
    predicted_overflow_minutes: Optional[int] = None
    urgency: float
    distance_from_previous: float
    estimated_time: int
    ward_number: Optional[int] = None
    waste_types: List[str] = Field(default_factory=list)


class RouteResponse(BaseModel):
    success: bool = True
    route: List[RouteStopModel]
    total_distance: float
    estimated_total_time: int
    hotspot_count: int
    signal_count: int
    timestamp: datetime
    metadata: dict
