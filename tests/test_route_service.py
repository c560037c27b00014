import asyncio
from datetime import timedelta

import pytest

from wasteroute.models.domain import Zone
from wasteroute.schemas.routing import RouteRequest
from wasteroute.services.routing import service as routing_service
from wasteroute.services.routing.models import RoadGeometry
from wasteroute.services.routing.osrm_client import OSRMClient
from wasteroute.services.signals import ReadyRecord
from wasteroute.services.simulation import ZoneRegistry

from conftest import T0

WORKER = (9.8640844, 76.513132)


def _zone(zid: str, lat: float, lon: float, fill: float = 300.0) -> Zone:
    return Zone(
        id=zid,
        name=zid,
        lat=lat,
        lon=lon,
        bin_capacity=1000.0,
        generation_rate=1.0,
        current_fill=fill,
        last_collection_time=T0 - timedelta(minutes=120),
        last_update=T0,
    )


class StaticSource:
    def __init__(self, records):
        self.records = records
        self.calls = 0

    async def fetch_ready(self):
        self.calls += 1
        return list(self.records)


class FailingSource:
    async def fetch_ready(self):
        raise ConnectionError("supabase unreachable")


class SlowSource:
    async def fetch_ready(self):
        await asyncio.sleep(5)
        return []


@pytest.fixture
def registry(clock) -> ZoneRegistry:
    zones = [
        _zone("zone_001", 9.8641, 76.5131, fill=900),
        _zone("zone_002", 9.8669, 76.5066, fill=200),
        _zone("zone_003", 9.8689, 76.5021, fill=500),
    ]
    return ZoneRegistry(zones, overflow_allowance=1.0, clock=clock)


def _plan(payload, registry, source, now=None):
    return asyncio.run(routing_service.plan_route(payload, registry, source, now=now))


def test_plan_route_puts_signals_first(registry):
    source = StaticSource([ReadyRecord(source_id="h1", location="POINT(76.47 9.884)", nickname="Far house")])

    response = _plan(RouteRequest(worker_lat=WORKER[0], worker_lng=WORKER[1]), registry, source)

    assert [stop.id for stop in response.route][0] == "household_h1"
    assert response.route[0].is_signal
    assert response.signal_count == 1
    assert len(response.route) == 4
    assert [stop.sequence for stop in response.route] == [1, 2, 3, 4]
    assert response.hotspot_count == 3
    assert response.estimated_total_time >= 0
    overlay = response.metadata["map_overlays"]["straight_line"]
    assert overlay[0] == [WORKER[0], WORKER[1]]
    assert len(overlay) == 5
    assert response.metadata["road_geometry"] is False


def test_plan_route_ticks_registry_first(registry, clock):
    later = clock.advance(60)

    _plan(RouteRequest(worker_lat=WORKER[0], worker_lng=WORKER[1]), registry, StaticSource([]), now=later)

    assert registry.get_zone("zone_002").current_fill == 260


def test_plan_route_restricts_zones_to_requested_ids(registry):
    payload = RouteRequest(worker_lat=WORKER[0], worker_lng=WORKER[1], zone_ids=["zone_003", "zone_404"])

    response = _plan(payload, registry, StaticSource([]))

    assert [stop.id for stop in response.route] == ["zone_003"]


def test_plan_route_skips_signals_when_disabled(registry):
    source = StaticSource([ReadyRecord(source_id="h1", location="POINT(76.47 9.884)")])
    payload = RouteRequest(worker_lat=WORKER[0], worker_lng=WORKER[1], include_signals=False)

    response = _plan(payload, registry, source)

    assert source.calls == 0
    assert response.signal_count == 0


def test_signal_fetch_failure_degrades_to_zones_only(registry):
    response = _plan(RouteRequest(worker_lat=WORKER[0], worker_lng=WORKER[1]), registry, FailingSource())

    assert response.success
    assert len(response.route) == 3
    assert response.signal_count == 0


def test_signal_fetch_timeout_yields_no_signals():
    assert asyncio.run(routing_service.fetch_signal_candidates(SlowSource(), timeout=0.05)) == []


def test_empty_candidate_set_gives_empty_route(registry):
    payload = RouteRequest(worker_lat=WORKER[0], worker_lng=WORKER[1], zone_ids=[])

    response = _plan(payload, registry, StaticSource([]))

    assert response.route == []
    assert response.total_distance == 0
    assert response.estimated_total_time == 0


def test_road_geometry_is_attached_when_available(registry, monkeypatch):
    class DummyOSRM:
        def road_geometry(self, coordinates):
            return RoadGeometry(coordinates=list(coordinates), distance_km=2.3456, duration_min=7.25)

    monkeypatch.setattr(routing_service, "OSRMClient", lambda *args, **kwargs: DummyOSRM())
    payload = RouteRequest(worker_lat=WORKER[0], worker_lng=WORKER[1], include_road_geometry=True)

    response = _plan(payload, registry, StaticSource([]))

    road = response.metadata["map_overlays"]["road"]
    assert response.metadata["road_geometry"] is True
    assert road["distance_km"] == 2.35
    assert len(road["coordinates"]) == 4


def test_road_geometry_failure_is_not_fatal(registry, monkeypatch):
    class BrokenOSRM:
        def road_geometry(self, coordinates):
            raise ConnectionError("osrm down")

    monkeypatch.setattr(routing_service, "OSRMClient", lambda *args, **kwargs: BrokenOSRM())
    payload = RouteRequest(worker_lat=WORKER[0], worker_lng=WORKER[1], include_road_geometry=True)

    response = _plan(payload, registry, StaticSource([]))

    assert "road" not in response.metadata["map_overlays"]
    assert len(response.route) == 3


def test_malformed_road_polyline_falls_back_to_straight_line(registry, monkeypatch):
    def build_client(*args, **kwargs):
        client = OSRMClient(base_url="http://osrm.test", max_retries=1, backoff_seconds=0)
        client.route = lambda coordinates: {
            "code": "Ok",
            "routes": [{"geometry": "_p~iF~ps|U_ulLnnqC_mqNvxq`", "distance": 1200.0, "duration": 300.0}],
        }
        return client

    monkeypatch.setattr(routing_service, "OSRMClient", build_client)
    payload = RouteRequest(worker_lat=WORKER[0], worker_lng=WORKER[1], include_road_geometry=True)

    response = _plan(payload, registry, StaticSource([]))

    assert response.metadata["road_geometry"] is False
    assert "road" not in response.metadata["map_overlays"]
    assert len(response.metadata["map_overlays"]["straight_line"]) == 4
    assert len(response.route) == 3


def test_hotspot_count_ignores_zone_filter(registry):
    payload = RouteRequest(worker_lat=WORKER[0], worker_lng=WORKER[1], zone_ids=["zone_002"], include_signals=False)

    response = _plan(payload, registry, StaticSource([]))

    assert [stop.id for stop in response.route] == ["zone_002"]
    assert response.hotspot_count == 3
