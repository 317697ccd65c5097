"""
SocialNet Backend — Middleware Tests
======================================

What we test:
    ✅ Sliding-window limiter: allows up to the quota, then 429 + Retry-After
    ✅ Old requests fall out of the window
    ✅ Excluded paths are never limited
    ✅ X-Request-ID is generated, or echoed when the client sends one
    ✅ A 429 from the full app carries the request ID in body and header
    ✅ Access log level follows the status; /health is not logged
"""

import logging

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from httpx import ASGITransport, AsyncClient

from socialnet.config import settings
from socialnet.middleware.logging import RequestLoggingMiddleware
from socialnet.middleware.rate_limit import RateLimitMiddleware
from socialnet.middleware.request_id import RequestIDMiddleware, request_id_var


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _limited_app(max_requests: int = 2, window_seconds: int = 60, clock=None) -> FastAPI:
    app = FastAPI()

    @app.get("/ping")
    async def ping():
        return {"pong": True}

    @app.get("/health")
    async def health():
        return {"status": "OK"}

    options = {"max_requests": max_requests, "window_seconds": window_seconds}
    if clock is not None:
        options["clock"] = clock
    app.add_middleware(RateLimitMiddleware, **options)
    return app


class TestRateLimiter:
    def test_hit_allows_quota_then_blocks(self):
        clock = FakeClock()
        limiter = RateLimitMiddleware(_limited_app(), max_requests=2, window_seconds=60, clock=clock)

        assert limiter.hit("1.2.3.4") is None
        assert limiter.hit("1.2.3.4") is None
        retry_after = limiter.hit("1.2.3.4")
        assert retry_after == 61

    def test_window_slides(self):
        clock = FakeClock()
        limiter = RateLimitMiddleware(_limited_app(), max_requests=1, window_seconds=60, clock=clock)

        assert limiter.hit("1.2.3.4") is None
        clock.now += 30
        assert limiter.hit("1.2.3.4") == 31
        clock.now += 31
        assert limiter.hit("1.2.3.4") is None

    def test_clients_are_counted_separately(self):
        limiter = RateLimitMiddleware(_limited_app(), max_requests=1, window_seconds=60, clock=FakeClock())
        assert limiter.hit("1.1.1.1") is None
        assert limiter.hit("2.2.2.2") is None

    @pytest.mark.asyncio
    async def test_429_envelope(self):
        transport = ASGITransport(app=_limited_app(max_requests=2))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/ping")).status_code == 200
            assert (await client.get("/ping")).status_code == 200
            response = await client.get("/ping")

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) >= 1
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "rate_limit_exceeded"
        assert body["message"] == "Too many requests, please try again later"

    @pytest.mark.asyncio
    async def test_health_is_never_limited(self):
        transport = ASGITransport(app=_limited_app(max_requests=1))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            statuses = [(await client.get("/health")).status_code for _ in range(3)]
        assert statuses == [200, 200, 200]


class TestRequestID:
    @staticmethod
    def _app() -> FastAPI:
        app = FastAPI()

        @app.get("/whoami")
        async def whoami():
            return {"request_id": request_id_var.get("")}

        app.add_middleware(RequestIDMiddleware)
        return app

    @pytest.mark.asyncio
    async def test_generated_id(self):
        transport = ASGITransport(app=self._app())
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/whoami")
        rid = response.headers["X-Request-ID"]
        assert len(rid) == 8
        assert response.json()["request_id"] == rid

    @pytest.mark.asyncio
    async def test_client_id_is_echoed(self):
        transport = ASGITransport(app=self._app())
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/whoami", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"


class TestRateLimitThroughApp:
    @pytest.mark.asyncio
    async def test_429_carries_request_id(self, test_client, monkeypatch):
        # The limiter reads its quota when the app builds its middleware stack
        monkeypatch.setattr(settings, "rate_limit_requests", 1)

        assert (await test_client.get("/users/username/nobody")).status_code == 404
        response = await test_client.get("/users/username/nobody")

        assert response.status_code == 429
        rid = response.headers["X-Request-ID"]
        assert response.json() == {
            "success": False,
            "error": "rate_limit_exceeded",
            "message": "Too many requests, please try again later",
            "request_id": rid,
            "details": {"retry_after": int(response.headers["Retry-After"])},
        }

    @pytest.mark.asyncio
    async def test_client_request_id_echoed_on_429(self, test_client, monkeypatch):
        monkeypatch.setattr(settings, "rate_limit_requests", 1)

        await test_client.get("/users/username/nobody")
        response = await test_client.get(
            "/users/username/nobody", headers={"X-Request-ID": "trace-429"}
        )

        assert response.status_code == 429
        assert response.headers["X-Request-ID"] == "trace-429"
        assert response.json()["request_id"] == "trace-429"


class TestRequestLogging:
    @staticmethod
    def _app() -> FastAPI:
        app = FastAPI()

        @app.get("/ok")
        async def ok():
            return {"ok": True}

        @app.get("/missing")
        async def missing():
            raise HTTPException(status_code=404, detail="nope")

        @app.get("/down")
        async def down():
            return JSONResponse(status_code=503, content={"ok": False})

        @app.get("/health")
        async def health():
            return {"status": "OK"}

        app.add_middleware(RequestLoggingMiddleware)
        app.add_middleware(RequestIDMiddleware)
        return app

    @staticmethod
    def _access_records(caplog):
        return [record for record in caplog.records if record.name == "socialnet.access"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path, status, level",
        [
            ("/ok", 200, logging.INFO),
            ("/missing", 404, logging.WARNING),
            ("/down", 503, logging.ERROR),
        ],
    )
    async def test_level_follows_status(self, caplog, path, status, level):
        caplog.set_level(logging.INFO, logger="socialnet.access")
        transport = ASGITransport(app=self._app())
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get(path)

        assert response.status_code == status
        records = self._access_records(caplog)
        assert len(records) == 1
        record = records[0]
        assert record.levelno == level
        assert record.status == status
        assert record.path == path
        assert record.method == "GET"
        assert record.request_id == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_health_is_not_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="socialnet.access")
        transport = ASGITransport(app=self._app())
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/health")).status_code == 200

        assert self._access_records(caplog) == []
