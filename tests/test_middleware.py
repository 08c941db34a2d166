"""
Middleware Tests: rate limiting, request correlation, structured logs.
"""

import json
import logging

import pytest
from httpx import AsyncClient, ASGITransport

from spirit.logging_config import REQUEST_ID_HEADER, StructuredFormatter, request_id_var
from spirit.main import create_app
from spirit.rate_limit import SlidingWindowLimiter
from tests.conftest import make_settings


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestSlidingWindowLimiter:
    def test_allows_up_to_limit(self):
        limiter = SlidingWindowLimiter(3, clock=FakeClock())
        assert [limiter.allow("ip") for _ in range(4)] == [True, True, True, False]

    def test_window_slides(self):
        clock = FakeClock()
        limiter = SlidingWindowLimiter(1, window_seconds=60, clock=clock)
        assert limiter.allow("ip") is True
        assert limiter.allow("ip") is False
        clock.now += 61
        assert limiter.allow("ip") is True

    def test_keys_are_independent(self):
        limiter = SlidingWindowLimiter(1, clock=FakeClock())
        assert limiter.allow("a") is True
        assert limiter.allow("b") is True
        assert limiter.allow("a") is False

    def test_idle_clients_are_forgotten(self):
        clock = FakeClock()
        limiter = SlidingWindowLimiter(5, window_seconds=60, clock=clock)
        for i in range(10):
            limiter.allow(f"10.0.0.{i}")
        assert limiter.tracked_keys == 10

        clock.now += 61
        limiter.allow("10.0.0.99")
        assert limiter.tracked_keys == 1

    def test_active_clients_survive_sweep(self):
        clock = FakeClock()
        limiter = SlidingWindowLimiter(2, window_seconds=60, clock=clock)
        limiter.allow("idle")
        clock.now += 50
        limiter.allow("busy")
        clock.now += 20
        assert limiter.allow("busy") is True
        assert limiter.tracked_keys == 1


@pytest.mark.asyncio
async def test_rate_limit_rejects_excess_requests():
    app = create_app(make_settings(rate_limit_per_minute=2))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        codes = [
            (await client.post("/invite/verify", json={"code": "nope"})).status_code
            for _ in range(3)
        ]
        assert codes == [404, 404, 429]

        limited = await client.post("/invite/verify", json={"code": "nope"})
        assert limited.json() == {"error": "Too many requests"}

        health = await client.get("/")
        assert health.status_code == 200
    await app.state.engine.dispose()


@pytest.mark.asyncio
async def test_rate_limit_keys_on_forwarded_for_when_trusted():
    app = create_app(make_settings(rate_limit_per_minute=1, trust_forwarded_for=True))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        async def verify(forwarded):
            response = await client.post(
                "/invite/verify",
                json={"code": "nope"},
                headers={"x-forwarded-for": forwarded},
            )
            return response.status_code

        assert await verify("203.0.113.7, 10.0.0.1") == 404
        assert await verify("198.51.100.4, 10.0.0.1") == 404
        assert await verify("203.0.113.7, 10.0.0.2") == 429
    await app.state.engine.dispose()


@pytest.mark.asyncio
async def test_rate_limit_ignores_forwarded_for_by_default():
    app = create_app(make_settings(rate_limit_per_minute=1))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        first = await client.post("/invite/verify", json={"code": "nope"}, headers={"x-forwarded-for": "203.0.113.7"})
        second = await client.post("/invite/verify", json={"code": "nope"}, headers={"x-forwarded-for": "198.51.100.4"})
        assert [first.status_code, second.status_code] == [404, 429]
    await app.state.engine.dispose()


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "online"
    assert data["message"].startswith("Spirit API is alive")
    assert data["timestamp"]


@pytest.mark.asyncio
async def test_request_id_generated(client: AsyncClient):
    response = await client.get("/")
    assert response.headers[REQUEST_ID_HEADER]


@pytest.mark.asyncio
async def test_request_id_propagated(client: AsyncClient):
    response = await client.get("/", headers={REQUEST_ID_HEADER: "trace-123"})
    assert response.headers[REQUEST_ID_HEADER] == "trace-123"


def test_structured_formatter_includes_request_id():
    record = logging.LogRecord("spirit.test", logging.INFO, __file__, 1, "hello %s", ("there",), None)
    record.extra_data = {"status": 200}
    token = request_id_var.set("req-42")
    try:
        entry = json.loads(StructuredFormatter().format(record))
    finally:
        request_id_var.reset(token)

    assert entry["message"] == "hello there"
    assert entry["level"] == "INFO"
    assert entry["request_id"] == "req-42"
    assert entry["data"] == {"status": 200}
