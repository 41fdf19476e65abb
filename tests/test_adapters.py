"""Tests for adapters/ — upstream payload shapes into internal models."""

from unittest.mock import AsyncMock

import pytest

from adapters.class_adapter import (
    DEFAULT_ENGAGEMENT,
    get_class_detail,
    get_class_performance,
    list_teacher_classes,
    parse_class,
)
from adapters.reflection_adapter import list_pending_reflections
from adapters.search_adapter import search
from adapters.session_adapter import create_session, list_available_topics, list_teacher_students
from models.sessions import SessionDraft


def _client(response):
    client = AsyncMock()
    client.get = AsyncMock(return_value=response)
    client.post = AsyncMock(return_value=response)
    return client


# ── Classes ─────────────────────────────────────────────────


def test_parse_class_camel_and_snake():
    camel = parse_class({"id": "c1", "name": "Civics", "enrollmentCount": 20})
    snake = parse_class({"classId": "c1", "className": "Civics", "enrollment_count": "20"})
    assert camel.class_id == snake.class_id == "c1"
    assert camel.total_students == snake.total_students == 20
    assert camel.active_students == 18
    assert camel.average_engagement == DEFAULT_ENGAGEMENT


def test_parse_class_bad_enrollment_is_zero():
    assert parse_class({"id": "c1", "enrollmentCount": "many"}).total_students == 0


@pytest.mark.asyncio
async def test_list_teacher_classes_unwraps_and_skips_junk():
    client = _client({"code": 200, "data": [{"id": "c1", "name": "A"}, "junk"]})
    classes = await list_teacher_classes(client, token="tok")
    assert [c.class_id for c in classes] == ["c1"]
    client.get.assert_awaited_once_with("/classes/teacher-classes", token="tok")


@pytest.mark.asyncio
async def test_list_teacher_classes_null_data_raises():
    with pytest.raises(ValueError, match="null data"):
        await list_teacher_classes(_client({"code": 200, "data": None}))


@pytest.mark.asyncio
async def test_get_class_detail_accepts_nested_class_key():
    payload = {
        "class": {
            "id": "c1", "name": "Civics",
            "teacher": {"id": "t1"}, "organization": {"id": "o1"},
            "createdAt": "2024-09-01T00:00:00Z", "updatedAt": "2024-09-02T00:00:00Z",
            "schedule": {"meetingTimes": [{"dayOfWeek": 2, "startTime": "09:00", "endTime": "10:00"}]},
        }
    }
    detail = await get_class_detail(_client({"data": payload}), "c1")
    assert detail.name == "Civics"
    assert detail.schedule.meeting_times[0].day_of_week == 2


@pytest.mark.asyncio
async def test_get_class_performance_dict_shape():
    rows = await get_class_performance(_client({"data": {"students": [{"id": "s1"}, 3]}}), "c1")
    assert rows == [{"id": "s1"}]


# ── Sessions ────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_list_available_topics_skips_malformed_rows():
    client = _client({"data": {"topics": [{"id": "t1", "title": "Ok"}, {"id": "t2"}]}})
    topics = await list_available_topics(client)
    assert [t.id for t in topics] == ["t1"]


@pytest.mark.asyncio
async def test_list_teacher_students_passes_class_param():
    client = _client({"data": []})
    await list_teacher_students(client, "class1")
    client.get.assert_awaited_once_with(
        "/students/teacher-students", params={"classId": "class1"}, token=None,
    )


@pytest.mark.asyncio
async def test_create_session_returns_session_id():
    client = _client({"data": {"sessionId": "sess-7"}})
    session_id = await create_session(client, SessionDraft(title="T"), "t-001")
    assert session_id == "sess-7"
    body = client.post.await_args.kwargs["json_body"]
    assert body["teacherId"] == "t-001"
    assert body["title"] == "T"


@pytest.mark.asyncio
async def test_create_session_without_id_raises():
    with pytest.raises(ValueError, match="no sessionId"):
        await create_session(_client({"data": {}}), SessionDraft(), "t-001")


# ── Reflections / search ────────────────────────────────────


@pytest.mark.asyncio
async def test_list_pending_reflections():
    row = {
        "id": "r1", "studentName": "Ana", "studentId": "s1",
        "debateTitle": "Plastics", "submittedAt": "2024-10-01T10:00:00Z",
    }
    reflections = await list_pending_reflections(_client({"data": {"reflections": [row, {"id": "bad"}]}}))
    assert [r.id for r in reflections] == ["r1"]
    assert reflections[0].review_status == "pending"


@pytest.mark.asyncio
async def test_search_maps_alternate_keys_and_limits():
    rows = [{"id": i, "kind": "class", "name": f"Class {i}"} for i in range(5)]
    results = await search(_client({"data": {"results": rows}}), "cla", limit=2)
    assert len(results) == 2
    assert results[0].type == "class"
    assert results[0].title == "Class 0"
    assert results[0].id == "0"
