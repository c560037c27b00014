from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from wasteroute.main import create_app
from wasteroute.models.domain import Zone
from wasteroute.services.signals import ReadyRecord
from wasteroute.services.simulation import ZoneRegistry

from conftest import T0


def _zone(zid: str, lat: float, lon: float, fill: float, rate: float = 5.0) -> Zone:
    return Zone(
        id=zid,
        name=f"Zone {zid}",
        lat=lat,
        lon=lon,
        bin_capacity=1000.0,
        generation_rate=rate,
        current_fill=fill,
        last_collection_time=T0 - timedelta(minutes=60),
        last_update=T0,
    )


class StaticSource:
    def __init__(self, records):
        self.records = records

    async def fetch_ready(self):
        return list(self.records)


@pytest.fixture
def registry(clock) -> ZoneRegistry:
    zones = [
        _zone("zone_001", 9.8641, 76.5131, fill=600),
        _zone("zone_002", 9.8669, 76.5066, fill=100),
        _zone("zone_003", 9.8689, 76.5021, fill=950, rate=0.0),
    ]
    return ZoneRegistry(zones, overflow_allowance=1.0, clock=clock)


@pytest.fixture
def api_client(registry) -> TestClient:
    source = StaticSource(
        [
            ReadyRecord(source_id="h1", location="POINT(76.4729 9.8841)", nickname="Kochupilly house", ward_number=4),
            ReadyRecord(source_id="h2", location="POINT(0 0)"),
        ]
    )
    return TestClient(create_app(registry=registry, signal_source=source))


def test_health(api_client: TestClient):
    response = api_client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_zones_endpoint_ticks_before_reading(api_client: TestClient, clock):
    clock.advance(40)

    response = api_client.get("/api/waste/zones")

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    zones = {zone["id"]: zone for zone in payload["zones"]}
    assert zones["zone_001"]["current_fill"] == 800
    assert zones["zone_001"]["fill_percentage"] == 80
    assert zones["zone_001"]["risk_level"] == "HIGH"
    assert zones["zone_001"]["predicted_overflow_minutes"] == 40
    assert zones["zone_003"]["predicted_overflow_minutes"] is None


def test_hotspots_endpoint_limits_results(api_client: TestClient):
    response = api_client.get("/api/waste/hotspots", params={"limit": 2})

    assert response.status_code == 200
    hotspots = response.json()["hotspots"]
    assert [zone["id"] for zone in hotspots] == ["zone_003", "zone_001"]


def test_collect_endpoint_resets_zone(api_client: TestClient):
    response = api_client.post("/api/waste/collect/zone_003", json={"amount": 2000})

    assert response.status_code == 200
    zone = response.json()["zone"]
    assert zone["fill_percentage"] == 0
    assert zone["risk_level"] == "LOW"
    assert zone["hotspot_score"] == 0


def test_collect_endpoint_uses_default_amount(api_client: TestClient):
    response = api_client.post("/api/waste/collect/zone_001")

    assert response.status_code == 200
    assert response.json()["zone"]["current_fill"] == 500


def test_collect_unknown_zone_returns_404(api_client: TestClient, registry: ZoneRegistry):
    response = api_client.post("/api/waste/collect/zone_999", json={"amount": 10})

    assert response.status_code == 404
    assert len(registry) == 3


def test_collect_rejects_negative_amount(api_client: TestClient):
    response = api_client.post("/api/waste/collect/zone_001", json={"amount": -5})

    assert response.status_code == 422


def test_collect_household_signal_bypasses_registry(api_client: TestClient, registry: ZoneRegistry):
    before = [zone.current_fill for zone in registry.get_zones()]

    response = api_client.post("/api/waste/collect/household_h1", json={"amount": 10})

    assert response.status_code == 200
    payload = response.json()
    assert payload["is_signal"] is True
    assert payload["zone"] is None
    assert [zone.current_fill for zone in registry.get_zones()] == before


def test_ready_households_endpoint(api_client: TestClient):
    response = api_client.get("/api/waste/ready-households")

    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == 1
    signal = payload["signals"][0]
    assert signal["id"] == "household_h1"
    assert signal["risk_level"] == "CRITICAL"
    assert signal["fill_percentage"] == 100
    assert signal["ward_number"] == 4


def test_optimize_route_endpoint(api_client: TestClient):
    response = api_client.post(
        "/api/waste/optimize-route",
        json={"worker_lat": 9.8640844, "worker_lng": 76.513132},
    )

    assert response.status_code == 200
    payload = response.json()
    route = payload["route"]
    assert route[0]["id"] == "household_h1"
    assert route[0]["is_signal"] is True
    assert {stop["id"] for stop in route[1:]} == {"zone_001", "zone_002", "zone_003"}
    assert payload["signal_count"] == 1
    assert payload["total_distance"] > 0
    assert all(stop["estimated_time"] == round(stop["distance_from_previous"] * 2.5) for stop in route)


def test_optimize_route_is_repeatable(api_client: TestClient):
    body = {"worker_lat": 9.87, "worker_lng": 76.49, "include_signals": False}

    first = api_client.post("/api/waste/optimize-route", json=body).json()
    second = api_client.post("/api/waste/optimize-route", json=body).json()

    assert [stop["id"] for stop in first["route"]] == [stop["id"] for stop in second["route"]]


def test_optimize_route_validates_coordinates(api_client: TestClient):
    response = api_client.post("/api/waste/optimize-route", json={"worker_lat": 120, "worker_lng": 76.5})

    assert response.status_code == 422


def test_database_health_when_supabase_missing(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from wasteroute.db import supabase as supabase_module

    monkeypatch.setattr(supabase_module, "get_supabase_client", lambda: None)

    response = api_client.get("/api/health/database")

    assert response.status_code == 200
    assert response.json()["configured"] is False


def test_osrm_health_without_base_url(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from wasteroute.services.routing import osrm_client

    monkeypatch.setattr(osrm_client.settings, "osrm_base_url", None)

    response = api_client.get("/api/health/osrm")

    assert response.json() == {"service": "osrm", "healthy": False}
