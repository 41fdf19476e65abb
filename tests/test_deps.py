"""Tests for api/deps.py token verification against /auth/me."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException

from api.deps import _verify_token


def _auth_me(status_code, body):
    resp = MagicMock(status_code=status_code)
    resp.json.return_value = body
    http = AsyncMock()
    http.get.return_value = resp
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = http
    return factory


@pytest.mark.asyncio
async def test_verified_identity():
    body = {"code": 200, "data": {"id": 7, "role": "ADMIN", "firstName": "Dana", "lastName": "Cole"}}
    with patch("api.deps.httpx.AsyncClient", _auth_me(200, body)):
        user = await _verify_token("tok")
    assert user.user_id == "7"
    assert user.role == "admin"
    assert user.name == "Dana Cole"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"code": 200, "data": None}, ["not", "a", "user"], {"data": {"role": "teacher"}}])
async def test_unusable_identity_is_unauthorized(body):
    with patch("api.deps.httpx.AsyncClient", _auth_me(200, body)):
        with pytest.raises(HTTPException) as exc_info:
            await _verify_token("tok")
    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_rejected_token_is_unauthorized():
    with patch("api.deps.httpx.AsyncClient", _auth_me(403, {})):
        with pytest.raises(HTTPException) as exc_info:
            await _verify_token("tok")
    assert exc_info.value.status_code == 401
