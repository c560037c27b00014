"""Pydantic request/response models for zone endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..config import settings
from ..models.domain import RiskLevel


class ZoneStateModel(BaseModel):
    id: str
    name: str
    lat: float
    lon: float
    bin_capacity: float
    generation_rate: float
    current_fill: float
    last_collection_time: datetime
    fill_percentage: float
    risk_level: RiskLevel
    hotspot_score: float
    predicted_overflow_minutes: Optional[int] = Field(
        default=None, description="Minutes until the bin reaches capacity; null when the zone does not fill."
    )


class ZonesResponse(BaseModel):
    success: bool = True
    zones: List[ZoneStateModel]
    timestamp: datetime


class HotspotsResponse(BaseModel):
    success: bool = True
    hotspots: List[ZoneStateModel]
    timestamp: datetime


class CollectRequest(BaseModel):
    amount: float = Field(
        default_factory=lambda: settings.default_collection_amount_kg,
        ge=0,
        description="Kilograms removed from the bin.",
    )


class CollectResponse(BaseModel):
    success: bool = True
    message: str
    zone: Optional[ZoneStateModel] = None
    is_signal: bool = False
    timestamp: datetime


class SignalModel(BaseModel):
    id: str
    source_id: str
    name: str
    lat: float
    lon: float
    fill_percentage: float
    risk_level: RiskLevel
    predicted_overflow_minutes: int
    ward_number: Optional[int] = None
    waste_types: List[str] = Field(default_factory=list)
    is_signal: bool = True


class ReadySignalsResponse(BaseModel):
    success: bool = True
    signals: List[SignalModel]
    count: int
    timestamp: datetime
