"""Request id propagation and access logging (pure ASGI, SSE-safe)."""

from __future__ import annotations

import logging
import time
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

_QUIET_PATHS = frozenset({"/api/health"})


class RequestIdMiddleware:
    """Tag every HTTP request with an id and log one line when it finishes.

    A client-supplied ``X-Request-ID`` is reused, otherwise an 8-char id is
    generated.  The id is stored on ``request.state.request_id`` and echoed
    back in the response headers.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers", []))
        request_id = headers.get(b"x-request-id", b"").decode() or uuid.uuid4().hex[:8]
        scope.setdefault("state", {})
        scope["state"]["request_id"] = request_id

        status = 500
        started = time.perf_counter()

        async def send_with_request_id(message: Message) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
                out = list(message.get("headers", []))
                out.append((b"x-request-id", request_id.encode()))
                message["headers"] = out
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            path = scope.get("path", "")
            if path not in _QUIET_PATHS:
                logger.info(
                    "%s %s -> %d (%.0fms) [%s]",
                    scope.get("method", ""), path, status,
                    (time.perf_counter() - started) * 1000, request_id,
                )
