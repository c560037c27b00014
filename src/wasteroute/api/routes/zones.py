"""Zone state, hotspot and collection endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ...config import settings
from ...schemas.zones import CollectRequest, CollectResponse, HotspotsResponse, ZonesResponse
from ...services import zones as zone_service
from ...services.simulation import ZoneRegistry
from ..dependencies import get_registry

router = APIRouter(prefix="/waste", tags=["zones"])


@router.get("/zones", response_model=ZonesResponse, status_code=status.HTTP_200_OK)
def get_zones(registry: ZoneRegistry = Depends(get_registry)) -> ZonesResponse:
    return zone_service.list_zones(registry)


@router.get("/hotspots", response_model=HotspotsResponse, status_code=status.HTTP_200_OK)
def get_hotspots(
    limit: int = Query(default=settings.default_hotspot_count, ge=1, le=100, description="Number of hotspots to return"),
    registry: ZoneRegistry = Depends(get_registry),
) -> HotspotsResponse:
    return zone_service.list_hotspots(registry, limit)


@router.post("/collect/{zone_id}", response_model=CollectResponse, status_code=status.HTTP_200_OK)
def collect_zone(
    zone_id: str,
    payload: CollectRequest | None = None,
    registry: ZoneRegistry = Depends(get_registry),
) -> CollectResponse:
    amount = payload.amount if payload else settings.default_collection_amount_kg
    try:
        result = zone_service.collect(registry, zone_id, amount)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error collecting waste from {zone_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Collection failed: {str(exc)}",
        ) from exc
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Zone {zone_id} not found")
    return result
