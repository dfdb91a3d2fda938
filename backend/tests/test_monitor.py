from __future__ import annotations

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from rtwm_backend.app import create_app
from rtwm_backend.services.monitor import MonitorService

TARGET_URL = "http://target.test/"
ORIGIN_URL = "http://origin.test/origin-uptime"


def route(target=None, origin=None):
    """Build a MockTransport answering origin-uptime URLs with ``origin`` and the rest with ``target``."""

    async def handler(request: httpx.Request) -> httpx.Response:
        fn = origin if request.url.path.endswith("origin-uptime") else target
        response = fn(request)
        if asyncio.iscoroutine(response):
            response = await response
        return response

    return httpx.MockTransport(handler)


def ok_target(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, headers={"Age": "30"}, text="x" * 128)


def ok_origin(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"uptime": 65})


async def slow(request: httpx.Request) -> httpx.Response:
    await asyncio.sleep(5)
    return httpx.Response(200, text="late")


def refused(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


@pytest.fixture
def make_client(settings):
    def _make(target=ok_target, origin=ok_origin, config=None):
        app = create_app(config or settings, transport=route(target, origin))
        return TestClient(app)

    return _make


def test_monitor_uses_configured_defaults(make_client):
    seen: list[str] = []

    def target(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return ok_target(request)

    response = make_client(target=target).get("/monitor")

    assert response.status_code == 200
    data = response.json()
    assert data["target"] == TARGET_URL
    assert seen == [TARGET_URL]
    assert data["online"] is True
    assert data["statusCode"] == 200
    assert data["latency"] >= 0
    assert data["cache"] == "HIT"
    assert data["cacheReason"] == "age:30"
    assert data["bandwidth"] == 128
    assert data["originUptime"] == 65
    assert data["originUptimeFormatted"] == "1m 5s"
    assert data["uptime"] >= 0
    assert isinstance(data["uptimeFormatted"], str)
    assert isinstance(data["timestamp"], int)


def test_monitor_record_has_exact_field_names(make_client):
    data = make_client().get("/monitor").json()
    assert set(data) == {
        "target",
        "online",
        "statusCode",
        "latency",
        "cache",
        "cacheReason",
        "bandwidth",
        "uptime",
        "uptimeFormatted",
        "originUptime",
        "originUptimeFormatted",
        "timestamp",
    }


def test_monitor_query_overrides(make_client, settings):
    seen: list[str] = []

    def target(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, headers={"X-Cache": "MISS"}, text="")

    def origin(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json=12)

    client = make_client(target=target, origin=origin)
    response = client.get(
        "/monitor",
        params={"target": "http://other.test/page", "originUptime": "http://peer.test/origin-uptime"},
    )

    data = response.json()
    assert data["target"] == "http://other.test/page"
    assert sorted(seen) == ["http://other.test/page", "http://peer.test/origin-uptime"]
    assert data["cache"] == "MISS"
    assert data["bandwidth"] == 0
    assert data["originUptime"] == 12
    # Shared configuration is untouched by per-request overrides.
    assert settings.target_url == TARGET_URL


def test_monitor_accepts_snake_case_origin_override(make_client):
    seen: list[str] = []

    def origin(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return ok_origin(request)

    make_client(origin=origin).get("/monitor", params={"origin_uptime": "http://peer.test/origin-uptime"})
    assert seen == ["http://peer.test/origin-uptime"]


def test_monitor_target_timeout_is_reported_in_payload(make_client):
    response = make_client(target=slow).get("/monitor")

    assert response.status_code == 200
    data = response.json()
    assert data["online"] is False
    assert data["latency"] == -1
    assert data["statusCode"] == 0
    assert data["cache"] == "NONE"
    assert data["cacheReason"] == "fetch-error:Timeout"
    assert data["bandwidth"] == 0
    # The origin branch still completes on its own.
    assert data["originUptime"] == 65


def test_monitor_target_network_error(make_client):
    data = make_client(target=refused).get("/monitor").json()
    assert data["online"] is False
    assert data["statusCode"] == 0
    assert data["cache"] == "NONE"
    assert data["cacheReason"] == "fetch-error:NetworkError"


def test_monitor_non_success_target_is_offline_but_measured(make_client):
    def target(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, headers={"CF-Cache-Status": "MISS"}, text="not found")

    data = make_client(target=target).get("/monitor").json()
    assert data["online"] is False
    assert data["statusCode"] == 404
    assert data["latency"] >= 0
    assert data["cache"] == "MISS"
    assert data["bandwidth"] == len("not found")


@pytest.mark.parametrize("origin", [slow, refused, lambda request: httpx.Response(200, text="<html>")])
def test_origin_failure_does_not_touch_target_fields(make_client, origin):
    baseline = make_client().get("/monitor").json()
    degraded = make_client(origin=origin).get("/monitor").json()

    for field in ("online", "statusCode", "cache", "cacheReason", "bandwidth"):
        assert degraded[field] == baseline[field]
    assert degraded["originUptime"] is None
    assert degraded["originUptimeFormatted"] == "unavailable"


def test_origin_non_success_status(make_client):
    data = make_client(origin=lambda request: httpx.Response(500)).get("/monitor").json()
    assert data["originUptime"] is None
    assert data["originUptimeFormatted"] == "unavailable (status 500)"
    assert data["online"] is True


def test_branches_run_concurrently(settings):
    async def delayed(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.25)
        if request.url.path.endswith("origin-uptime"):
            return httpx.Response(200, json={"uptime": 1})
        return httpx.Response(200, text="ok")

    config = settings.model_copy(update={"fetch_timeout_ms": 1000})
    service = MonitorService(config, transport=httpx.MockTransport(delayed))

    async def run():
        loop = asyncio.get_running_loop()
        started = loop.time()
        record = await service.measure()
        return record, loop.time() - started

    record, elapsed = asyncio.run(run())
    assert record.online is True
    assert record.origin_uptime_seconds == 1
    assert elapsed < 0.45


def test_origin_uptime_endpoint(make_client):
    response = make_client().get("/origin-uptime")
    assert response.status_code == 200
    data = response.json()
    assert set(data) == {"uptime", "uptimeFormatted", "timestamp"}
    assert data["uptime"] >= 0
    assert isinstance(data["timestamp"], int)


def test_origin_uptime_can_be_relayed_by_a_peer(settings):
    peer = create_app(settings)
    service = MonitorService(settings, transport=httpx.ASGITransport(app=peer))

    record = asyncio.run(service.measure(target="http://peer.test/", origin_uptime_url="http://peer.test/origin-uptime"))

    assert record.online is True
    assert record.origin_uptime_seconds is not None
    assert record.origin_uptime_formatted.endswith("s")


def test_root_describes_service(make_client):
    response = make_client().get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "RTWM - Real Time Website Monitoring"
    assert data["endpoints"] == {"monitor": "/monitor", "originUptime": "/origin-uptime"}
    assert data["defaults"] == {"target": TARGET_URL, "originUptimeEndpoint": ORIGIN_URL}
    assert "docs" in data
    assert "notes" in data


def test_unknown_route_is_404(make_client):
    assert make_client().get("/nope").status_code == 404


def test_cors_allows_any_origin(make_client):
    response = make_client().get("/origin-uptime", headers={"Origin": "https://dashboard.example"})
    assert response.headers["access-control-allow-origin"] == "*"


@pytest.mark.parametrize("body", ['{"uptime": 1' + "0" * 400 + "}", "1" * 5000])
def test_oversized_origin_uptime_degrades_instead_of_failing(settings, body):
    transport = route(ok_target, lambda request: httpx.Response(200, text=body))
    client = TestClient(create_app(settings, transport=transport), raise_server_exceptions=False)

    response = client.get("/monitor")

    assert response.status_code == 200
    data = response.json()
    assert data["online"] is True
    assert data["originUptime"] is None
    assert data["originUptimeFormatted"] == "unavailable"


def test_unexpected_origin_error_keeps_the_target_measurement(settings, monkeypatch):
    async def explode(*args, **kwargs):
        raise RuntimeError("relay bug")

    monkeypatch.setattr("rtwm_backend.services.monitor.fetch_origin_uptime", explode)
    service = MonitorService(settings, transport=route(ok_target, ok_origin))

    record = asyncio.run(service.measure())

    assert record.online is True
    assert record.cache_reason == "age:30"
    assert record.origin_uptime_seconds is None
    assert record.origin_uptime_formatted == "unavailable"
