"""Adapter for platform Class APIs → internal ClassOverview / ClassDetail.

Backend endpoints handled:
- GET /classes/teacher-classes                → list[ClassOverview]
- GET /classes/{classId}                      → ClassDetail
- GET /performance-analytics/class/{classId}  → list of per-student rows
"""

from __future__ import annotations

import logging
import math
from typing import Any

from models.classes import ClassDetail, ClassOverview
from services.backend_client import BackendClient

logger = logging.getLogger(__name__)

# The backend does not report these yet; the dashboard shows fixed figures.
DEFAULT_ENGAGEMENT = 0.75
DEFAULT_COMPLETION = 0.82
DEFAULT_CLASS_AVERAGE = 0.78


# ---------------------------------------------------------------------------
# Response → Internal Model conversions
# ---------------------------------------------------------------------------

def _string_or_empty(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _int_or_zero(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def parse_class(raw: dict[str, Any]) -> ClassOverview:
    """Convert a backend class row to :class:`ClassOverview`."""
    enrollment = _int_or_zero(
        raw.get("enrollmentCount") or raw.get("enrollment_count") or raw.get("currentEnrollment")
    )
    return ClassOverview(
        class_id=_string_or_empty(raw.get("id") or raw.get("classId")),
        class_name=_string_or_empty(raw.get("name") or raw.get("className")),
        total_students=enrollment,
        active_students=math.floor(enrollment * 0.9),
        average_engagement=DEFAULT_ENGAGEMENT,
        completion_rate=DEFAULT_COMPLETION,
        overall_class_average=DEFAULT_CLASS_AVERAGE,
        upcoming_deadlines=_int_or_zero(raw.get("upcomingDeadlines")),
    )


# ---------------------------------------------------------------------------
# High-level API calls (through BackendClient)
# ---------------------------------------------------------------------------

async def list_teacher_classes(client: BackendClient, token: str | None = None) -> list[ClassOverview]:
    """Fetch all classes for the calling teacher.

    GET /classes/teacher-classes

    Raises:
        ValueError: When the backend returns null data.
    """
    resp = await client.get("/classes/teacher-classes", token=token)
    items = _unwrap_data(resp)
    if items is None:
        raise ValueError("list_teacher_classes: backend returned null data")
    if isinstance(items, dict):
        items = items.get("classes")
    if not isinstance(items, list):
        logger.warning("list_teacher_classes: expected list, got %s", type(items))
        return []
    return [parse_class(c) for c in items if isinstance(c, dict)]


async def get_class_detail(
    client: BackendClient, class_id: str, token: str | None = None
) -> ClassDetail:
    """Fetch detailed class info.

    GET /classes/{classId}

    Accepts both camelCase and snake_case payloads.
    """
    resp = await client.get(f"/classes/{class_id}", token=token)
    raw = _unwrap_data(resp)
    if raw is None:
        raise ValueError(f"get_class_detail: backend returned null data for class {class_id}")
    if not isinstance(raw, dict):
        raise ValueError(f"get_class_detail: unexpected shape {type(raw)}")
    raw = raw.get("class", raw)
    return ClassDetail.model_validate(raw)


async def get_class_performance(
    client: BackendClient, class_id: str, token: str | None = None
) -> list[dict[str, Any]]:
    """Fetch per-student performance rows for a class.

    GET /performance-analytics/class/{classId}
    """
    resp = await client.get(f"/performance-analytics/class/{class_id}", token=token)
    raw = _unwrap_data(resp)
    if raw is None:
        raise ValueError(f"get_class_performance: backend returned null data for class {class_id}")
    if isinstance(raw, dict):
        raw = raw.get("students", [])
    if not isinstance(raw, list):
        logger.warning("get_class_performance: unexpected shape %s", type(raw))
        return []
    return [s for s in raw if isinstance(s, dict)]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _unwrap_data(response: Any) -> Any:
    """Extract the ``data`` field from a ``{code, message, data}`` wrapper.

    If the response is already raw data (no wrapper), return as-is.
    """
    if isinstance(response, dict) and "data" in response:
        return response["data"]
    return response
