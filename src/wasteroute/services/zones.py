"""Zone snapshot, hotspot and collection operations behind the API."""

from __future__ import annotations

from typing import Optional

from ..schemas.zones import CollectResponse, HotspotsResponse, ZonesResponse
from .outputs.formatter import zone_to_model
from .signals import is_signal_id
from .simulation import ZoneRegistry


def list_zones(registry: ZoneRegistry) -> ZonesResponse:
    now = registry.now()
    registry.tick(now)
    return ZonesResponse(zones=[zone_to_model(zone) for zone in registry.get_zones(now)], timestamp=now)


def list_hotspots(registry: ZoneRegistry, limit: int) -> HotspotsResponse:
    now = registry.now()
    registry.tick(now)
    return HotspotsResponse(
        hotspots=[zone_to_model(zone) for zone in registry.get_hotspots(limit, now)],
        timestamp=now,
    )


def collect(registry: ZoneRegistry, zone_id: str, amount: float) -> Optional[CollectResponse]:
    """Record a pickup. Returns ``None`` when the zone does not exist.

    Household signals are not zones; their pickup is acknowledged without
    touching the registry.
    """

    now = registry.now()
    if is_signal_id(zone_id):
        return CollectResponse(
            message=f"Household pickup confirmed for {zone_id}",
            is_signal=True,
            timestamp=now,
        )

    registry.tick(now)
    snapshot = registry.collect(zone_id, amount, now)
    if snapshot is None:
        return None
    return CollectResponse(
        message=f"Collected {amount:g}kg from {zone_id}",
        zone=zone_to_model(snapshot),
        timestamp=now,
    )
