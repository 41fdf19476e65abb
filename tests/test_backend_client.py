"""Tests for services/backend_client.py — HTTP client for the platform backend."""

import time
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from services.backend_client import (
    CIRCUIT_OPEN_THRESHOLD,
    BackendClient,
    BackendClientError,
    CircuitOpenError,
    get_backend_client,
)
from services.metrics import get_metrics_collector


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _settings(token="svc-token"):
    s = MagicMock()
    s.backend_base_url = "https://platform.example.com/"
    s.backend_api_prefix = "/api"
    s.backend_timeout = 10
    s.backend_access_token = token
    return s


@pytest.fixture
async def client():
    """A started client that is not the module singleton."""
    with patch("services.backend_client.get_settings", return_value=_settings()):
        c = BackendClient()
    await c.start()
    yield c
    await c.close()


def _response(status=200, data=None, text=None):
    r = MagicMock()
    r.status_code = status
    r.text = text if text is not None else '{"ok":true}'
    r.json.return_value = data if data is not None else {"ok": True}
    r.url = "https://platform.example.com/api/test"
    return r


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

def test_base_url_strips_trailing_slash():
    with patch("services.backend_client.get_settings", return_value=_settings()):
        c = BackendClient()
    assert c._base_url == "https://platform.example.com/api"


def test_auth_headers_without_service_token():
    with patch("services.backend_client.get_settings", return_value=_settings(token="")):
        c = BackendClient()
    assert c._auth_headers() == {}


def test_requests_before_start_raise():
    with patch("services.backend_client.get_settings", return_value=_settings()):
        c = BackendClient()
    assert c.started is False
    with pytest.raises(RuntimeError, match="not started"):
        c._ensure_started()


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

async def test_get_returns_json(client):
    client._http.request = AsyncMock(return_value=_response(data={"code": 200, "data": [1, 2]}))
    assert await client.get("/classes/teacher-classes") == {"code": 200, "data": [1, 2]}


async def test_caller_token_overrides_service_token(client):
    client._http.request = AsyncMock(return_value=_response())
    await client.get("/topics/available", token="user-jwt")
    _, kwargs = client._http.request.call_args
    assert kwargs["headers"] == {"Authorization": "Bearer user-jwt"}


async def test_empty_body_returns_empty_dict(client):
    client._http.request = AsyncMock(return_value=_response(text=""))
    assert await client.post("/sessions/create", json_body={"title": "x"}) == {}


async def test_put_sends_json(client):
    client._http.request = AsyncMock(return_value=_response(data={"data": {"saved": True}}))
    result = await client.put("/settings/s1", json_body={"value": 3})
    assert result["data"]["saved"] is True
    _, kwargs = client._http.request.call_args
    assert kwargs["json"] == {"value": 3}


async def test_update_token_swaps_default_header(client):
    client.update_token("rotated")
    assert client._http.headers["Authorization"] == "Bearer rotated"


# ---------------------------------------------------------------------------
# Retry logic
# ---------------------------------------------------------------------------

async def test_no_retry_on_4xx(client):
    client._http.request = AsyncMock(return_value=_response(status=404, text="Not Found"))
    with pytest.raises(BackendClientError) as exc_info:
        await client.get("/classes/missing")
    assert exc_info.value.status_code == 404
    assert client._http.request.call_count == 1
    assert client._consecutive_failures == 0


async def test_retry_on_5xx_then_success(client):
    client._http.request = AsyncMock(
        side_effect=[_response(status=502, text="Bad Gateway"), _response(data={"recovered": True})]
    )
    with patch("services.backend_client.RETRY_BASE_DELAY", 0):
        result = await client.get("/search")
    assert result == {"recovered": True}
    assert client._http.request.call_count == 2
    assert client._consecutive_failures == 0


async def test_retry_exhausted_raises_last_error(client):
    client._http.request = AsyncMock(return_value=_response(status=503, text="down"))
    with patch("services.backend_client.RETRY_BASE_DELAY", 0), \
         patch("services.backend_client.MAX_RETRIES", 2):
        with pytest.raises(BackendClientError) as exc_info:
            await client.get("/search")
    assert exc_info.value.status_code == 503
    assert client._http.request.call_count == 2


async def test_network_error_exhausts_to_transport_error(client):
    client._http.request = AsyncMock(side_effect=httpx.ConnectError("refused"))
    with patch("services.backend_client.RETRY_BASE_DELAY", 0):
        with pytest.raises(httpx.ConnectError):
            await client.get("/topics/available")
    assert client._consecutive_failures == 3


async def test_calls_are_recorded_in_metrics(client):
    get_metrics_collector().reset()
    client._http.request = AsyncMock(return_value=_response())
    await client.get("/classes/c-42")
    snapshot = get_metrics_collector().snapshot()
    assert snapshot["endpoints"]["GET /classes/{id}"]["count"] == 1


# ---------------------------------------------------------------------------
# Circuit breaker
# ---------------------------------------------------------------------------

def test_circuit_opens_after_threshold(client):
    assert client.circuit_open is False
    for _ in range(CIRCUIT_OPEN_THRESHOLD):
        client._record_failure()
    assert client.circuit_open is True


async def test_open_circuit_fails_fast(client):
    client._http.request = AsyncMock()
    for _ in range(CIRCUIT_OPEN_THRESHOLD):
        client._record_failure()
    with pytest.raises(CircuitOpenError):
        await client.get("/search")
    client._http.request.assert_not_called()


def test_circuit_half_opens_after_timeout(client):
    for _ in range(CIRCUIT_OPEN_THRESHOLD):
        client._record_failure()
    client._circuit_opened_at = time.monotonic() - 120
    assert client.circuit_open is False


def test_singleton():
    import services.backend_client as mod

    mod._client = None
    assert get_backend_client() is get_backend_client()
    mod._client = None
