"""Per-worker cap on heavy endpoints: audit streams, exports, report generation.

Pure ASGI so Server-Sent Events pass through unbuffered.  Requests beyond
the cap get 503 with ``Retry-After`` instead of queueing.
"""

from __future__ import annotations

import asyncio
import json
import logging

from starlette.types import ASGIApp, Receive, Scope, Send

from config.settings import get_settings

logger = logging.getLogger(__name__)

HEAVY_PATHS = frozenset({
    "/api/audit/stream",
    "/api/audit/export",
    "/api/reports/generate",
    "/api/reports/export",
})

_heavy_semaphore: asyncio.Semaphore | None = None


def is_heavy(path: str) -> bool:
    if path in HEAVY_PATHS:
        return True
    # /api/session-logs/{session_id}/export
    return path.startswith("/api/session-logs/") and path.endswith("/export")


def _get_heavy_semaphore() -> asyncio.Semaphore:
    """Lazy-init so the semaphore binds to the running event loop."""
    global _heavy_semaphore
    if _heavy_semaphore is None:
        limit = get_settings().max_concurrent_heavy
        _heavy_semaphore = asyncio.Semaphore(limit)
        logger.info("Heavy endpoint semaphore initialized (max=%d)", limit)
    return _heavy_semaphore


def reset_heavy_semaphore() -> None:
    global _heavy_semaphore
    _heavy_semaphore = None


class ConcurrencyLimitMiddleware:
    """Reject heavy requests with 503 when the worker is at capacity."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not is_heavy(scope.get("path", "")):
            await self.app(scope, receive, send)
            return

        sem = _get_heavy_semaphore()
        if sem.locked():
            path = scope.get("path", "")
            logger.warning("Concurrency limit reached for %s, returning 503", path)
            body = json.dumps(
                {"detail": "Server busy: too many concurrent requests. Please retry."}
            ).encode()
            await send({
                "type": "http.response.start",
                "status": 503,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"retry-after", b"5"),
                ],
            })
            await send({"type": "http.response.body", "body": body})
            return

        async with sem:
            await self.app(scope, receive, send)
