"""Pooled async client for the debate platform REST backend.

Every call goes through one path: an optional per-call bearer token, up to
``MAX_RETRIES`` attempts with doubling backoff for transport errors and 5xx
responses, and a consecutive-failure circuit breaker that fails fast while
the backend is down.  Each attempt is timed into the metrics collector.
The pool is opened and closed by the application lifespan.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from config.settings import get_settings
from services.metrics import endpoint_key, get_metrics_collector

logger = logging.getLogger(__name__)

_client: BackendClient | None = None

MAX_RETRIES = 3
RETRY_BASE_DELAY = 0.5  # seconds, doubles each attempt
CIRCUIT_OPEN_THRESHOLD = 5  # consecutive failures before circuit opens
CIRCUIT_RESET_TIMEOUT = 60  # seconds before attempting to close circuit


class BackendClientError(Exception):
    """Raised when the platform backend returns a non-2xx response."""

    def __init__(self, status_code: int, detail: str, url: str = ""):
        self.status_code = status_code
        self.detail = detail
        self.url = url
        super().__init__(f"Backend API {status_code}: {detail} ({url})")


class CircuitOpenError(Exception):
    """Raised when the circuit breaker is open (backend deemed unavailable)."""

    def __init__(self):
        super().__init__("Circuit breaker open: platform backend unavailable")


class BackendClient:
    """Async HTTP client for the platform backend with retry and circuit breaker."""

    def __init__(self) -> None:
        settings = get_settings()
        self._base_url = f"{settings.backend_base_url.rstrip('/')}{settings.backend_api_prefix}"
        self._timeout = settings.backend_timeout
        self._access_token = settings.backend_access_token
        self._http: httpx.AsyncClient | None = None

        # Circuit breaker state
        self._consecutive_failures = 0
        self._circuit_opened_at: float | None = None

    # -- lifecycle -----------------------------------------------------------

    async def start(self) -> None:
        """Create the underlying ``httpx.AsyncClient`` connection pool."""
        if self._http is not None:
            return
        self._http = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout),
            headers=self._auth_headers(),
            limits=httpx.Limits(
                max_connections=30,
                max_keepalive_connections=15,
                keepalive_expiry=30,
            ),
        )
        logger.info("BackendClient started, base_url=%s", self._base_url)

    async def close(self) -> None:
        """Gracefully close the connection pool."""
        if self._http is not None:
            await self._http.aclose()
            self._http = None
            logger.info("BackendClient closed")

    @property
    def started(self) -> bool:
        return self._http is not None

    # -- public API ----------------------------------------------------------

    async def get(self, path: str, params: dict[str, Any] | None = None, token: str | None = None) -> Any:
        """GET *path* and return the decoded JSON body.

        *token* replaces the service token for this call only, so the
        backend sees the dashboard user's own identity.
        """
        return await self._call("GET", path, params=params, token=token)

    async def post(self, path: str, json_body: Any = None, token: str | None = None) -> Any:
        return await self._call("POST", path, json_body=json_body, token=token)

    async def put(self, path: str, json_body: Any = None, token: str | None = None) -> Any:
        return await self._call("PUT", path, json_body=json_body, token=token)

    # -- token management ----------------------------------------------------

    def update_token(self, access_token: str) -> None:
        """Hot-swap the service token without recreating the client."""
        self._access_token = access_token
        if self._http is not None:
            self._http.headers.update(self._auth_headers())
        logger.info("BackendClient token updated")

    # -- circuit breaker -----------------------------------------------------

    @property
    def circuit_open(self) -> bool:
        """True when the backend is deemed unavailable."""
        if self._consecutive_failures < CIRCUIT_OPEN_THRESHOLD:
            return False
        # half-open: one probe goes through after the reset timeout
        opened = self._circuit_opened_at
        return opened is None or time.monotonic() - opened < CIRCUIT_RESET_TIMEOUT

    def _record_success(self) -> None:
        if self._consecutive_failures:
            logger.info("Platform backend healthy again (%d failures cleared)", self._consecutive_failures)
        self._consecutive_failures = 0
        self._circuit_opened_at = None

    def _record_failure(self) -> None:
        self._consecutive_failures += 1
        if self._consecutive_failures >= CIRCUIT_OPEN_THRESHOLD and self._circuit_opened_at is None:
            self._circuit_opened_at = time.monotonic()
            logger.warning(
                "Platform backend circuit open after %d failures; probing again in %ds",
                self._consecutive_failures, CIRCUIT_RESET_TIMEOUT,
            )

    # -- request path --------------------------------------------------------

    async def _call(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        token: str | None = None,
    ) -> Any:
        """Send one logical request, retrying 5xx and transport failures.

        A 4xx raises :class:`BackendClientError` at once; an open circuit
        raises :class:`CircuitOpenError` before anything is sent.
        """
        if self.circuit_open:
            raise CircuitOpenError()

        http = self._ensure_started()
        metrics = get_metrics_collector()
        key = endpoint_key(method, path)
        headers = {"Authorization": f"Bearer {token}"} if token else None

        attempt = 0
        while True:
            attempt += 1
            started = time.monotonic()
            try:
                response = await http.request(method, path, params=params, json=json_body, headers=headers)
            except httpx.TransportError as exc:
                elapsed_ms = (time.monotonic() - started) * 1000
                self._record_failure()
                metrics.record_call(endpoint=key, status="network_error", latency_ms=elapsed_ms)
                logger.warning("%s %s failed after %.0fms: %s", method, path, elapsed_ms, exc)
                if attempt >= MAX_RETRIES:
                    raise
                await self._backoff(method, path, attempt)
                continue

            elapsed_ms = (time.monotonic() - started) * 1000
            status = response.status_code
            logger.info("%s %s -> %d (%.0fms)", method, path, status, elapsed_ms)
            metrics.record_call(endpoint=key, status="ok" if status < 400 else str(status), latency_ms=elapsed_ms)

            if status < 400:
                self._record_success()
                return response.json() if response.text else {}

            error = BackendClientError(status, response.text[:500] or f"HTTP {status}", str(response.url))
            if status < 500:
                # the backend answered, so it counts as alive
                self._record_success()
                raise error

            self._record_failure()
            if attempt >= MAX_RETRIES:
                raise error
            await self._backoff(method, path, attempt)

    async def _backoff(self, method: str, path: str, attempt: int) -> None:
        delay = RETRY_BASE_DELAY * (2 ** (attempt - 1))
        logger.warning("%s %s retry %d/%d in %.1fs", method, path, attempt, MAX_RETRIES, delay)
        await asyncio.sleep(delay)

    # -- internals -----------------------------------------------------------

    def _auth_headers(self) -> dict[str, str]:
        if not self._access_token:
            return {}
        return {"Authorization": f"Bearer {self._access_token}"}

    def _ensure_started(self) -> httpx.AsyncClient:
        if self._http is None:
            raise RuntimeError("BackendClient not started, call await client.start() first")
        return self._http


def get_backend_client() -> BackendClient:
    """Return the process-wide :class:`BackendClient`, creating it on first use."""
    global _client
    if _client is None:
        _client = BackendClient()
    return _client
