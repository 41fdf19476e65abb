"""Request dependencies: the authenticated dashboard user.

Bearer tokens are verified against the platform's ``GET /auth/me`` and the
resulting identity is cached for ``AUTH_CACHE_TTL`` seconds, keyed by a
hash of the token.  In mock mode the identity comes from ``X-User-*``
headers instead so the dashboard can run without a backend.
"""

from __future__ import annotations

import hashlib
import logging
import time

import httpx
from fastapi import HTTPException, Request

from config.settings import get_settings
from models.user import CurrentUser

logger = logging.getLogger(__name__)

# sha256(token)[:16] → (user without token, expire_at)
_verified_cache: dict[str, tuple[CurrentUser, float]] = {}

DEFAULT_MOCK_USER = "teacher-1"


def _bearer(request: Request) -> str:
    return request.headers.get("Authorization", "").removeprefix("Bearer ").strip()


def clear_auth_cache() -> None:
    _verified_cache.clear()


def _mock_user(request: Request, token: str) -> CurrentUser:
    return CurrentUser(
        user_id=request.headers.get("X-User-Id") or DEFAULT_MOCK_USER,
        role=request.headers.get("X-User-Role") or "teacher",
        name=request.headers.get("X-User-Name") or "Demo Teacher",
        email=request.headers.get("X-User-Email", ""),
        token=token,
    )


async def _verify_token(token: str) -> CurrentUser:
    settings = get_settings()
    url = f"{settings.backend_base_url.rstrip('/')}{settings.backend_api_prefix}/auth/me"
    try:
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.get(url, headers={"Authorization": f"Bearer {token}"})
    except httpx.TransportError as exc:
        logger.error("Failed to verify token with platform backend: %s", exc)
        raise HTTPException(status_code=502, detail="Auth service unavailable")

    if resp.status_code != 200:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    body = resp.json()
    data = body.get("data", body) if isinstance(body, dict) else None
    if not isinstance(data, dict):
        raise HTTPException(status_code=401, detail="Could not extract user id from token")
    user_id = str(data.get("id") or data.get("userId") or "")
    if not user_id:
        raise HTTPException(status_code=401, detail="Could not extract user id from token")

    first_last = f"{data.get('firstName', '')} {data.get('lastName', '')}".strip()
    return CurrentUser(
        user_id=user_id,
        role=str(data.get("role") or "teacher").lower(),
        name=str(data.get("name") or first_last),
        email=str(data.get("email") or ""),
    )


async def get_current_user(request: Request) -> CurrentUser:
    """Resolve the caller; never trusts identity fields in the request body."""
    settings = get_settings()
    token = _bearer(request)
    if settings.use_mock_data:
        return _mock_user(request, token)

    if not token:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    cache_key = hashlib.sha256(token.encode()).hexdigest()[:16]
    cached = _verified_cache.get(cache_key)
    if cached is not None:
        user, expire_at = cached
        if time.time() < expire_at:
            return user.model_copy(update={"token": token})
        _verified_cache.pop(cache_key, None)

    user = await _verify_token(token)
    _verified_cache[cache_key] = (user, time.time() + settings.auth_cache_ttl)
    logger.info("Verified user_id=%s role=%s via /auth/me", user.user_id, user.role)
    return user.model_copy(update={"token": token})
