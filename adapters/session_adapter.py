"""Adapter for platform Topic / Student / Session APIs.

Backend endpoints handled:
- GET  /topics/available                      → list[DebateTopic]
- GET  /students/teacher-students?classId=    → list[StudentProfile]
- GET  /sessions/teacher-sessions             → list[DebateSession]
- POST /sessions/create                       → new session id
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from models.sessions import DebateSession, DebateTopic, SessionDraft, StudentProfile
from services.backend_client import BackendClient

logger = logging.getLogger(__name__)


def _extract_list(raw: Any, key: str, source: str) -> list[dict[str, Any]]:
    """Accept either a bare list or ``{key: [...]}``; skip non-dict rows."""
    if raw is None:
        raise ValueError(f"{source}: backend returned null data")
    if isinstance(raw, dict):
        raw = raw.get(key)
    if not isinstance(raw, list):
        logger.warning("%s: expected list, got %s", source, type(raw))
        return []
    return [item for item in raw if isinstance(item, dict)]


def _parse_all(model: type[BaseModel], rows: list[dict[str, Any]], source: str) -> list[Any]:
    parsed = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as exc:
            logger.warning("%s: skipping malformed row %s: %s", source, row.get("id"), exc)
    return parsed


async def list_available_topics(client: BackendClient, token: str | None = None) -> list[DebateTopic]:
    """GET /topics/available"""
    resp = await client.get("/topics/available", token=token)
    rows = _extract_list(_unwrap_data(resp), "topics", "list_available_topics")
    return _parse_all(DebateTopic, rows, "list_available_topics")


async def list_teacher_students(
    client: BackendClient, class_id: str | None = None, token: str | None = None
) -> list[StudentProfile]:
    """GET /students/teacher-students (optionally scoped to one class)."""
    params = {"classId": class_id} if class_id else None
    resp = await client.get("/students/teacher-students", params=params, token=token)
    rows = _extract_list(_unwrap_data(resp), "students", "list_teacher_students")
    return _parse_all(StudentProfile, rows, "list_teacher_students")


async def list_teacher_sessions(client: BackendClient, token: str | None = None) -> list[DebateSession]:
    """GET /sessions/teacher-sessions"""
    resp = await client.get("/sessions/teacher-sessions", token=token)
    rows = _extract_list(_unwrap_data(resp), "sessions", "list_teacher_sessions")
    return _parse_all(DebateSession, rows, "list_teacher_sessions")


async def create_session(
    client: BackendClient, draft: SessionDraft, teacher_id: str, token: str | None = None
) -> str:
    """POST /sessions/create — returns the new session's id."""
    body = draft.model_dump(mode="json", by_alias=True)
    body["teacherId"] = teacher_id
    resp = await client.post("/sessions/create", json_body=body, token=token)
    raw = _unwrap_data(resp)
    if not isinstance(raw, dict):
        raise ValueError("create_session: backend returned no session payload")
    session_id = raw.get("sessionId") or raw.get("session_id") or raw.get("id")
    if not session_id:
        raise ValueError("create_session: backend response has no sessionId")
    return str(session_id)


def _unwrap_data(response: Any) -> Any:
    """Extract the ``data`` field from a ``{code, message, data}`` wrapper."""
    if isinstance(response, dict) and "data" in response:
        return response["data"]
    return response
