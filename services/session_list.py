"""Teacher session list — load, tab/filter, per-status counts, row actions."""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone

from adapters.session_adapter import list_teacher_sessions
from errors import UpstreamError, ValidationFailedError
from models.sessions import DebateSession, SessionAction, SessionFilters, SessionTab
from models.user import CurrentUser
from services import mock_data
from services.backend_client import BackendClient, get_backend_client
from services.fallback import fall_back, should_use_mock
from services.notifications import NotificationStore, get_notification_center

logger = logging.getLogger(__name__)

FORMAT_LABELS = {
    "oxford": "Oxford Style",
    "lincoln-douglas": "Lincoln-Douglas",
    "parliamentary": "Parliamentary",
    "fishbowl": "Fishbowl",
    "socratic": "Socratic Seminar",
}

# action -> path template the UI navigates to
_NAVIGATION_ACTIONS = {
    "view": "/teacher/sessions/{id}",
    "edit": "/teacher/sessions/{id}/edit",
    "monitor": "/teacher/sessions/{id}/monitor",
}

# action -> (notification title, message verb)
_NOTIFY_ACTIONS = {
    "duplicate": ("Duplicating Session", "Creating a copy of"),
    "start": ("Starting Session", "Starting"),
    "archive": ("Archiving Session", "Archiving"),
    "delete": ("Deleting Session", "Deleting"),
}


def format_label(format_id: str) -> str:
    return FORMAT_LABELS.get(format_id, format_id)


async def load_sessions(
    user: CurrentUser, client: BackendClient | None = None
) -> tuple[list[DebateSession], str]:
    """Return ``(sessions, source)``; upstream failures serve the mock list."""
    if should_use_mock():
        return mock_data.get_sessions(user.user_id, user.name), "mock"

    client = client or get_backend_client()
    try:
        sessions = await list_teacher_sessions(client, token=user.token or None)
    except Exception as exc:
        if not fall_back("session_list.load", exc):
            raise UpstreamError(f"Failed to load sessions: {exc}") from exc
        return mock_data.get_sessions(user.user_id, user.name), "mock"
    return sessions, "backend"


def apply_filters(
    sessions: list[DebateSession],
    tab: SessionTab,
    filters: SessionFilters,
    now: datetime | None = None,
) -> list[DebateSession]:
    now = now or datetime.now(timezone.utc)
    if tab == "upcoming":
        result = [
            s for s in sessions
            if s.status in ("scheduled", "draft") and s.scheduled_date >= now
        ]
    elif tab in ("live", "completed"):
        result = [s for s in sessions if s.status == tab]
    else:
        result = list(sessions)

    if filters.search:
        needle = filters.search.lower()
        result = [
            s for s in result
            if needle in s.title.lower()
            or needle in s.description.lower()
            or needle in s.topic.title.lower()
        ]
    if filters.status:
        result = [s for s in result if s.status == filters.status]
    if filters.format:
        result = [s for s in result if s.format == filters.format]
    return result


def status_counts(sessions: list[DebateSession]) -> dict[str, int]:
    counts = Counter(s.status for s in sessions)
    return {status: counts.get(status, 0) for status in ("draft", "scheduled", "live", "completed", "cancelled")}


async def perform_action(
    session_id: str,
    action: SessionAction,
    user: CurrentUser,
    title: str = "",
    notifications: NotificationStore | None = None,
) -> dict[str, str]:
    """Resolve a row action into a navigation path or a notification."""
    if action in _NAVIGATION_ACTIONS:
        return {"action": action, "navigate": _NAVIGATION_ACTIONS[action].format(id=session_id)}
    if action in _NOTIFY_ACTIONS:
        heading, verb = _NOTIFY_ACTIONS[action]
        label = f'"{title}"' if title else f"session {session_id}"
        center = notifications or get_notification_center()
        await center.add(user.user_id, "info", heading, f"{verb} {label}...")
        logger.info("Session action %s on %s by %s", action, session_id, user.user_id)
        return {"action": action, "navigate": ""}
    raise ValidationFailedError(f"Unknown session action: {action}", field="action")
