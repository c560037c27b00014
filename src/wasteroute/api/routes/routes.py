"""Route optimization endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.routing import RouteRequest, RouteResponse
from ...services.routing.service import plan_route
from ...services.signals import SignalSource
from ...services.simulation import ZoneRegistry
from ..dependencies import get_registry, get_signal_source

router = APIRouter(prefix="/waste", tags=["routes"])


@router.post("/optimize-route", response_model=RouteResponse, status_code=status.HTTP_200_OK)
async def optimize(
    payload: RouteRequest,
    registry: ZoneRegistry = Depends(get_registry),
    signal_source: SignalSource = Depends(get_signal_source),
) -> RouteResponse:
    try:
        return await plan_route(payload, registry, signal_source)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing route: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}",
        ) from exc
