"""Ready-for-pickup household signals."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from ...schemas.zones import ReadySignalsResponse
from ...services.outputs.formatter import signal_to_model
from ...services.routing.service import fetch_signal_candidates
from ...services.signals import SignalSource
from ..dependencies import get_signal_source

router = APIRouter(prefix="/waste", tags=["signals"])


@router.get("/ready-households", response_model=ReadySignalsResponse, status_code=status.HTTP_200_OK)
async def ready_households(signal_source: SignalSource = Depends(get_signal_source)) -> ReadySignalsResponse:
    signals = await fetch_signal_candidates(signal_source)
    return ReadySignalsResponse(
        signals=[signal_to_model(signal) for signal in signals],
        count=len(signals),
        timestamp=datetime.now(timezone.utc),
    )
