"""Adapter for the platform search API → internal SearchResult.

Backend endpoints handled:
- GET /search?q=&scope=&limit= → list[SearchResult]
"""

from __future__ import annotations

import logging
from typing import Any

from models.search import SearchResult
from services.backend_client import BackendClient

logger = logging.getLogger(__name__)


def _parse_result(raw: dict[str, Any]) -> SearchResult:
    return SearchResult(
        id=str(raw.get("id", "")),
        type=str(raw.get("type") or raw.get("kind") or ""),
        title=str(raw.get("title") or raw.get("name") or ""),
        subtitle=str(raw.get("subtitle") or raw.get("description") or ""),
        url=str(raw.get("url") or ""),
    )


async def search(
    client: BackendClient,
    query: str,
    scope: str = "all",
    limit: int = 20,
    token: str | None = None,
) -> list[SearchResult]:
    """GET /search"""
    resp = await client.get(
        "/search",
        params={"q": query, "scope": scope, "limit": limit},
        token=token,
    )
    raw = _unwrap_data(resp)
    if raw is None:
        raise ValueError("search: backend returned null data")
    if isinstance(raw, dict):
        raw = raw.get("results")
    if not isinstance(raw, list):
        logger.warning("search: expected list, got %s", type(raw))
        return []
    return [_parse_result(r) for r in raw[:limit] if isinstance(r, dict)]


def _unwrap_data(response: Any) -> Any:
    """Extract the ``data`` field from a ``{code, message, data}`` wrapper."""
    if isinstance(response, dict) and "data" in response:
        return response["data"]
    return response
