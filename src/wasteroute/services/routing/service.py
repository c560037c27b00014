"""Route planning orchestration: tick, gather candidates, order, serialize."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional, Sequence

import httpx
from fastapi.concurrency import run_in_threadpool

from ...config import settings
from ...models.domain import Candidate, SignalPoint, ZoneSnapshot
from ...schemas.routing import RouteRequest, RouteResponse
from ..outputs.formatter import route_to_response
from ..signals import SignalSource, to_signal_candidates
from ..simulation import ZoneRegistry
from .models import PriorityRoute, RoadGeometry
from .optimizer import optimize_route
from .osrm_client import OSRMClient

logger = logging.getLogger(__name__)


def _filter_zones(zones: Sequence[ZoneSnapshot], zone_ids: Sequence[str] | None) -> list[ZoneSnapshot]:
    if zone_ids is None:
        return list(zones)
    id_set = {zid.strip() for zid in zone_ids}
    return [zone for zone in zones if zone.id in id_set]


async def fetch_signal_candidates(source: SignalSource, timeout: Optional[float] = None) -> list[SignalPoint]:
    """Fetch ready signals, degrading to none when the upstream store misbehaves."""

    timeout = timeout if timeout is not None else settings.signal_fetch_timeout_seconds
    try:
        records = await asyncio.wait_for(source.fetch_ready(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Signal fetch timed out after {timeout:.1f}s; routing zones only")
        return []
    except Exception as exc:
        logger.warning(f"Signal fetch failed; routing zones only: {exc}")
        return []
    candidates = to_signal_candidates(records)
    logger.info(f"Fetched {len(records)} ready records, {len(candidates)} usable signals")
    return candidates


def _road_geometry(route: PriorityRoute) -> Optional[RoadGeometry]:
    if not route.stops:
        return None
    try:
        client = OSRMClient()
    except ValueError:
        logger.info("Road geometry requested but OSRM is not configured")
        return None
    coordinates = [(route.start_lat, route.start_lon)]
    coordinates.extend((stop.candidate.lat, stop.candidate.lon) for stop in route.stops)
    try:
        return client.road_geometry(coordinates)
    except (ConnectionError, ValueError, KeyError, httpx.HTTPError) as exc:
        logger.warning(f"OSRM road geometry unavailable: {exc}")
        return None


async def plan_route(
    payload: RouteRequest,
    registry: ZoneRegistry,
    signal_source: SignalSource,
    *,
    now: Optional[datetime] = None,
) -> RouteResponse:
    now = now or registry.now()
    registry.tick(now)
    zones = _filter_zones(registry.get_zones(now), payload.zone_ids)
    hotspot_ids = [zone.id for zone in registry.get_hotspots(settings.default_hotspot_count, now)]

    signals = await fetch_signal_candidates(signal_source) if payload.include_signals else []
    candidates: list[Candidate] = [*signals, *zones]
    route = optimize_route(payload.worker_lat, payload.worker_lng, candidates)
    logger.info(
        f"Planned route with {len(route.stops)} stops ({route.signal_count} signals), "
        f"{route.total_distance_km:.2f} km"
    )

    road_geometry = await run_in_threadpool(_road_geometry, route) if payload.include_road_geometry else None
    return route_to_response(
        route,
        timestamp=now,
        hotspot_ids=hotspot_ids,
        road_geometry=road_geometry,
        metadata={
            "candidate_count": len(candidates),
            "zone_count": len(zones),
            "road_geometry": road_geometry is not None,
        },
    )
