"""Adapter for platform Reflection APIs → internal ReflectionSummary.

Backend endpoints handled:
- GET /reflections/teacher/pending → list[ReflectionSummary]
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from models.reflections import ReflectionSummary
from services.backend_client import BackendClient

logger = logging.getLogger(__name__)


async def list_pending_reflections(
    client: BackendClient, token: str | None = None
) -> list[ReflectionSummary]:
    """GET /reflections/teacher/pending

    Raises:
        ValueError: When the backend returns null data.
    """
    resp = await client.get("/reflections/teacher/pending", token=token)
    raw = _unwrap_data(resp)
    if raw is None:
        raise ValueError("list_pending_reflections: backend returned null data")
    if isinstance(raw, dict):
        raw = raw.get("reflections")
    if not isinstance(raw, list):
        logger.warning("list_pending_reflections: expected list, got %s", type(raw))
        return []

    reflections = []
    for row in raw:
        if not isinstance(row, dict):
            continue
        try:
            reflections.append(ReflectionSummary.model_validate(row))
        except ValidationError:
            logger.warning("list_pending_reflections: skipping malformed row %s", row.get("id"))
    return reflections


def _unwrap_data(response: Any) -> Any:
    """Extract the ``data`` field from a ``{code, message, data}`` wrapper."""
    if isinstance(response, dict) and "data" in response:
        return response["data"]
    return response
