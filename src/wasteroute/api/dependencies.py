"""FastAPI dependencies for the shared registry and signal source."""

from __future__ import annotations

from fastapi import Request

from ..services.signals import SignalSource
from ..services.simulation import ZoneRegistry


def get_registry(request: Request) -> ZoneRegistry:
    return request.app.state.registry


def get_signal_source(request: Request) -> SignalSource:
    return request.app.state.signal_source
