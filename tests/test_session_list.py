"""Tests for services/session_list.py and services/class_detail.py."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from errors import UpstreamError, ValidationFailedError
from models.classes import ClassDetail
from models.sessions import SessionFilters
from services import mock_data
from services.class_detail import (
    ClassDetailService,
    formatted_schedule,
    status_badge,
)
from services.session_list import (
    apply_filters,
    format_label,
    load_sessions,
    perform_action,
    status_counts,
)


@pytest.fixture
def sessions(teacher):
    return mock_data.get_sessions(teacher.user_id, teacher.name)


# ---------------------------------------------------------------------------
# Session list
# ---------------------------------------------------------------------------

def test_upcoming_tab_keeps_future_scheduled_and_drafts(sessions):
    result = apply_filters(sessions, "upcoming", SessionFilters())
    assert {s.id for s in result} == {"1", "3"}


def test_upcoming_tab_drops_past_dates(sessions):
    later = datetime.now(timezone.utc) + timedelta(days=3)
    result = apply_filters(sessions, "upcoming", SessionFilters(), now=later)
    assert [s.id for s in result] == ["3"]


def test_status_tabs_and_all(sessions):
    assert [s.id for s in apply_filters(sessions, "completed", SessionFilters())] == ["2"]
    assert apply_filters(sessions, "live", SessionFilters()) == []
    assert len(apply_filters(sessions, "all", SessionFilters())) == 3


def test_search_covers_topic_title(sessions):
    result = apply_filters(sessions, "all", SessionFilters(search="CURRICULUM"))
    assert [s.id for s in result] == ["3"]


def test_status_and_format_filters(sessions):
    assert [s.id for s in apply_filters(sessions, "all", SessionFilters(format="socratic"))] == ["2"]
    assert [s.id for s in apply_filters(sessions, "all", SessionFilters(status="draft"))] == ["3"]


def test_status_counts_include_zeroes(sessions):
    counts = status_counts(sessions)
    assert counts == {"draft": 1, "scheduled": 1, "live": 0, "completed": 1, "cancelled": 0}


def test_format_label():
    assert format_label("lincoln-douglas") == "Lincoln-Douglas"
    assert format_label("custom") == "custom"


@pytest.mark.asyncio
async def test_load_sessions_falls_back_on_upstream_error(teacher):
    with patch("services.session_list.should_use_mock", return_value=False), \
         patch("services.session_list.list_teacher_sessions", new_callable=AsyncMock,
               side_effect=RuntimeError("down")):
        sessions, source = await load_sessions(teacher, client=AsyncMock())
    assert source == "mock"
    assert sessions[0].teacher.id == teacher.user_id


@pytest.mark.asyncio
async def test_load_sessions_without_fallback_raises(teacher):
    with patch("services.session_list.should_use_mock", return_value=False), \
         patch("services.session_list.fall_back", return_value=False), \
         patch("services.session_list.list_teacher_sessions", new_callable=AsyncMock,
               side_effect=RuntimeError("down")):
        with pytest.raises(UpstreamError):
            await load_sessions(teacher, client=AsyncMock())


@pytest.mark.asyncio
async def test_backend_sessions_without_offset_reach_upcoming_tab(teacher):
    client = AsyncMock()
    client.get.return_value = {"code": 200, "message": "ok", "data": [{
        "id": "s-42",
        "title": "Space Exploration",
        "topic": {"id": "t-1", "title": "Should we colonize Mars?"},
        "format": "oxford",
        "status": "scheduled",
        "scheduledDate": "2099-03-01T10:00:00",
        "teacher": {"id": teacher.user_id},
        "createdAt": "2024-09-01T08:00:00",
        "updatedAt": "2024-09-02T08:00:00",
    }]}
    with patch("services.session_list.should_use_mock", return_value=False):
        sessions, source = await load_sessions(teacher, client=client)

    assert source == "backend"
    assert sessions[0].scheduled_date == datetime(2099, 3, 1, 10, tzinfo=timezone.utc)
    assert sessions[0].created_at.tzinfo is timezone.utc
    assert [s.id for s in apply_filters(sessions, "upcoming", SessionFilters())] == ["s-42"]


@pytest.mark.asyncio
async def test_navigation_action(teacher, notifications):
    result = await perform_action("7", "monitor", teacher, notifications=notifications)
    assert result == {"action": "monitor", "navigate": "/teacher/sessions/7/monitor"}
    assert await notifications.list(teacher.user_id) == []


@pytest.mark.asyncio
async def test_notify_action(teacher, notifications):
    await perform_action("7", "duplicate", teacher, title="AI Ethics", notifications=notifications)
    [note] = await notifications.list(teacher.user_id)
    assert note.title == "Duplicating Session"
    assert note.message == 'Creating a copy of "AI Ethics"...'


@pytest.mark.asyncio
async def test_unknown_action_rejected(teacher, notifications):
    with pytest.raises(ValidationFailedError):
        await perform_action("7", "teleport", teacher, notifications=notifications)


# ---------------------------------------------------------------------------
# Class detail
# ---------------------------------------------------------------------------

def test_status_badge():
    assert status_badge("active", True) == "Active"
    assert status_badge("active", False) == "Inactive"


def test_formatted_schedule_day_names(teacher):
    detail = mock_data.get_class_detail("class1", teacher.user_id)
    days = [m.day for m in formatted_schedule(detail)]
    assert days == ["Monday", "Wednesday", "Friday"]


def test_formatted_schedule_without_schedule(teacher):
    detail = mock_data.get_class_detail("class1", teacher.user_id)
    detail.schedule = None
    assert formatted_schedule(detail) == []


@pytest.mark.asyncio
async def test_load_mock_uses_current_teacher(teacher, notifications):
    view = await ClassDetailService(notifications=notifications).load("class1", teacher)
    assert view.source == "mock"
    assert view.class_data.teacher.name == teacher.name
    assert view.status_badge == "Active"


@pytest.mark.asyncio
async def test_load_falls_back_on_upstream_error(teacher, notifications):
    service = ClassDetailService(client=AsyncMock(), notifications=notifications)
    with patch("services.class_detail.should_use_mock", return_value=False), \
         patch("services.class_detail.get_class_detail", new_callable=AsyncMock,
               side_effect=ValueError("null data")):
        view = await service.load("class9", teacher)
    assert view.source == "mock"
    assert view.class_data.id == "class9"


@pytest.mark.asyncio
async def test_load_from_backend(teacher, notifications):
    detail = mock_data.get_class_detail("class2", "t-x")
    assert isinstance(detail, ClassDetail)
    service = ClassDetailService(client=AsyncMock(), notifications=notifications)
    with patch("services.class_detail.should_use_mock", return_value=False), \
         patch("services.class_detail.get_class_detail", new_callable=AsyncMock, return_value=detail):
        view = await service.load("class2", teacher)
    assert view.source == "backend"


@pytest.mark.asyncio
async def test_archive_sticks_across_loads(teacher, notifications):
    service = ClassDetailService(notifications=notifications)
    view = await service.archive("class1", teacher)
    assert view.class_data.status == "archived"
    assert view.status_badge == "Inactive"

    reloaded = await service.load("class1", teacher)
    assert reloaded.class_data.is_active is False

    [note] = await notifications.list(teacher.user_id)
    assert note.type == "success"
    assert note.title == "Class Archived"


@pytest.mark.asyncio
async def test_share_notifies(teacher, notifications):
    await ClassDetailService(notifications=notifications).share("class1", teacher)
    [note] = await notifications.list(teacher.user_id)
    assert note.type == "info"
    assert note.title == "Share Class"
