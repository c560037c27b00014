"""FastAPI application entry point."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, routes, signals, zones
from .config import settings
from .data.zones_repository import build_zones, load_zone_seeds
from .db.supabase import is_configured as supabase_configured
from .services.signals import NullSignalSource, SignalSource, SupabaseSignalSource
from .services.simulation import ZoneRegistry, utcnow

logger = logging.getLogger(__name__)


def build_registry() -> ZoneRegistry:
    zone_list = build_zones(load_zone_seeds(), utcnow())
    logger.info("Seeded zone registry with %d zones", len(zone_list))
    return ZoneRegistry(zone_list)


def build_signal_source() -> SignalSource:
    if supabase_configured():
        return SupabaseSignalSource()
    logger.warning("Supabase not configured; routes will include zones only")
    return NullSignalSource()


def create_app(
    registry: Optional[ZoneRegistry] = None,
    signal_source: Optional[SignalSource] = None,
) -> FastAPI:
    app = FastAPI(title=settings.app_name, root_path="")
    app.state.registry = registry if registry is not None else build_registry()
    app.state.signal_source = signal_source if signal_source is not None else build_signal_source()

    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(zones.router, prefix=settings.api_prefix)
    app.include_router(signals.router, prefix=settings.api_prefix)
    app.include_router(routes.router, prefix=settings.api_prefix)
    return app


app = create_app()
