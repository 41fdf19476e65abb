"""Tests for request-id tagging and the heavy-endpoint concurrency cap."""

from __future__ import annotations

import asyncio

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from services import concurrency
from services.concurrency import ConcurrencyLimitMiddleware, is_heavy
from services.middleware import RequestIdMiddleware


def _app() -> FastAPI:
    app = FastAPI()

    @app.get("/api/ping")
    async def ping():
        return {"ok": True}

    @app.get("/api/audit/export")
    async def export():
        return {"ok": True}

    app.add_middleware(ConcurrencyLimitMiddleware)
    app.add_middleware(RequestIdMiddleware)
    return app


@pytest.fixture
async def client():
    transport = ASGITransport(app=_app())
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ---------------------------------------------------------------------------
# Request id
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_request_id_generated(client):
    resp = await client.get("/api/ping")
    assert resp.status_code == 200
    assert len(resp.headers["x-request-id"]) == 8


@pytest.mark.asyncio
async def test_request_id_echoed(client):
    resp = await client.get("/api/ping", headers={"X-Request-ID": "abc-123"})
    assert resp.headers["x-request-id"] == "abc-123"


# ---------------------------------------------------------------------------
# Concurrency limit
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("path,heavy", [
    ("/api/audit/stream", True),
    ("/api/audit/export", True),
    ("/api/reports/generate", True),
    ("/api/session-logs/s-1/export", True),
    ("/api/session-logs/s-1", False),
    ("/api/audit", False),
])
def test_is_heavy(path, heavy):
    assert is_heavy(path) is heavy


@pytest.mark.asyncio
async def test_heavy_request_rejected_at_capacity(client):
    concurrency._heavy_semaphore = asyncio.Semaphore(1)
    await concurrency._heavy_semaphore.acquire()
    try:
        resp = await client.get("/api/audit/export")
    finally:
        concurrency._heavy_semaphore.release()

    assert resp.status_code == 503
    assert resp.headers["retry-after"] == "5"
    assert "Server busy" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_light_request_ignores_capacity(client):
    concurrency._heavy_semaphore = asyncio.Semaphore(1)
    await concurrency._heavy_semaphore.acquire()
    try:
        resp = await client.get("/api/ping")
    finally:
        concurrency._heavy_semaphore.release()
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_heavy_request_passes_with_capacity(client):
    resp = await client.get("/api/audit/export")
    assert resp.status_code == 200
