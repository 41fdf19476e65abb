"""Tests for services/analytics.py — dashboard assembly and the engagement heat map."""

import random
from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from errors import UpstreamError
from models.analytics import EngagementRecord, StudentSummary
from models.classes import ClassOverview
from models.reflections import ReflectionSummary
from services.analytics import (
    band,
    build_insights,
    dashboard,
    engagement_data,
    engagement_patterns,
    heat_map,
    metric_value,
    timeframe_days,
)


def _student(i, *, progress=0.5, risk="low", trend="stable"):
    return StudentSummary(
        id=f"student-{i}", name=f"Student {i}", overall_progress=progress,
        risk_level=risk, engagement_trend=trend,
    )


def _reflection(i, status):
    return ReflectionSummary(
        id=f"r{i}", student_name="x", student_id="s", debate_title="d",
        submitted_at=datetime(2024, 10, 8, tzinfo=timezone.utc), review_status=status,
    )


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

def test_insights_cover_attention_average_and_pending():
    students = [_student(1, progress=0.8, trend="declining"), _student(2, progress=0.7)]
    reflections = [_reflection(1, "pending"), _reflection(2, "reviewed"), _reflection(3, "pending")]
    insights = build_insights(students, reflections)

    assert [i.title for i in insights] == ["Students Need Attention", "Class Average", "Pending Reviews"]
    attention, average, pending = insights
    assert attention.type == "warning"
    assert attention.students == ["student-1"]
    assert attention.description == "1 students showing declining engagement patterns"
    assert average.type == "success"
    assert average.description == "Average overall progress is 75%"
    assert pending.description == "2 reflections awaiting teacher review"


def test_low_average_is_informational():
    [average] = build_insights([_student(1, progress=0.4)], [])
    assert average.type == "info"


def test_no_data_no_insights():
    assert build_insights([], []) == []


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_mock_dashboard_selects_first_class(teacher, rng):
    data = await dashboard(teacher, rng=rng)
    assert [c.class_name for c in data.available_classes] == [
        "Advanced Biology", "World History", "Civics & Debate",
    ]
    assert data.selected_class.class_id == "class1"
    assert data.selected_class.upcoming_deadlines == 3
    assert len(data.students) == 12
    assert len(data.pending_reflections) == 6
    assert len(data.recent_activity) == 8


@pytest.mark.asyncio
async def test_mock_dashboard_honours_selection(teacher, rng):
    data = await dashboard(teacher, selected_class_id="class3", rng=rng)
    assert data.selected_class.class_name == "Civics & Debate"


@pytest.mark.asyncio
async def test_unknown_selection_leaves_no_class(teacher, rng):
    data = await dashboard(teacher, selected_class_id="nope", rng=rng)
    assert data.selected_class is None


@pytest.mark.asyncio
async def test_backend_dashboard_uses_performance_rows(teacher, rng):
    classes = [ClassOverview(class_id="c-1", class_name="Rhetoric", total_students=20, active_students=18)]
    with patch("services.analytics.should_use_mock", return_value=False), \
         patch("services.analytics.list_teacher_classes", new_callable=AsyncMock, return_value=classes), \
         patch("services.analytics.get_class_performance", new_callable=AsyncMock,
               return_value=[{"studentId": "a"}, {"studentId": "b"}]), \
         patch("services.analytics.list_pending_reflections", new_callable=AsyncMock, return_value=[]):
        data = await dashboard(teacher, client=AsyncMock(), rng=rng)
    assert data.selected_class.class_id == "c-1"
    assert data.selected_class.active_students == 2
    assert classes[0].active_students == 18


@pytest.mark.asyncio
async def test_performance_failure_degrades(teacher, rng):
    classes = [ClassOverview(class_id="c-1", class_name="Rhetoric", active_students=18)]
    with patch("services.analytics.should_use_mock", return_value=False), \
         patch("services.analytics.list_teacher_classes", new_callable=AsyncMock, return_value=classes), \
         patch("services.analytics.get_class_performance", new_callable=AsyncMock,
               side_effect=RuntimeError("timeout")), \
         patch("services.analytics.list_pending_reflections", new_callable=AsyncMock, return_value=[]):
        data = await dashboard(teacher, selected_class_id="c-1", client=AsyncMock(), rng=rng)
    assert data.selected_class.active_students == 18


@pytest.mark.asyncio
async def test_pending_reflection_failure_is_logged(teacher, rng, caplog):
    classes = [ClassOverview(class_id="c-1", class_name="Rhetoric")]
    with patch("services.analytics.should_use_mock", return_value=False), \
         patch("services.analytics.list_teacher_classes", new_callable=AsyncMock, return_value=classes), \
         patch("services.analytics.get_class_performance", new_callable=AsyncMock, return_value=[]), \
         patch("services.analytics.list_pending_reflections", new_callable=AsyncMock,
               side_effect=RuntimeError("reflections down")):
        with caplog.at_level("WARNING", logger="services.analytics"):
            data = await dashboard(teacher, client=AsyncMock(), rng=rng)
    assert data.selected_class.class_id == "c-1"
    assert "Pending reflections unavailable: reflections down" in caplog.text


@pytest.mark.asyncio
async def test_class_list_failure_raises(teacher, rng):
    with patch("services.analytics.should_use_mock", return_value=False), \
         patch("services.analytics.list_teacher_classes", new_callable=AsyncMock,
               side_effect=RuntimeError("down")), \
         patch("services.analytics.list_pending_reflections", new_callable=AsyncMock, return_value=[]):
        with pytest.raises(UpstreamError):
            await dashboard(teacher, client=AsyncMock(), rng=rng)


# ---------------------------------------------------------------------------
# Heat map
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("timeframe,days", [("week", 7), ("month", 30), ("semester", 90)])
def test_timeframe_days(timeframe, days):
    assert timeframe_days(timeframe) == days


@pytest.mark.parametrize("value,expected", [
    (100, "excellent"), (80, "excellent"), (79.9, "high"), (60, "high"),
    (40, "good"), (20, "medium"), (0.1, "low"), (0, "none"),
])
def test_band(value, expected):
    assert band(value) == expected


def _record(student_id, day, **kw):
    return EngagementRecord.model_validate({
        "student_id": student_id,
        "day_offset": day,
        "date": date(2024, 10, 9) - timedelta(days=day),
        "engagement_score": kw.get("score", 50.0),
        "activities": {"debate_participation": 10.0, "reflection_activity": 20.0, "peer_interaction": 30.0},
        "time_spent": kw.get("minutes", 60),
    })


@pytest.mark.parametrize("metric,expected", [
    ("overall_engagement", 50.0),
    ("debate_participation", 10.0),
    ("reflection_activity", 20.0),
    ("peer_interaction", 30.0),
    ("time_spent", 50.0),
])
def test_metric_value(metric, expected):
    assert metric_value(_record("s", 0), metric) == expected


def test_heat_map_week_fills_missing_days():
    students = [_student(1)]
    data = [_record("student-1", 0, score=85.0), _record("student-1", 2, score=45.0)]
    hm = heat_map(students, data, timeframe="week")

    assert hm.days == 7
    assert len(hm.cells) == 7
    assert [c.band for c in hm.cells[:3]] == ["excellent", "none", "good"]
    assert hm.cells[0].date == date(2024, 10, 9)
    assert hm.cells[6].date == date(2024, 10, 3)
    assert hm.day_labels[0] == "Oct 3"
    assert hm.day_labels[-1] == "Oct 9"


def test_heat_map_caps_display_days(rng):
    students = [_student(1), _student(2)]
    data = engagement_data(students, "semester", rng)
    assert len(data) == 2 * 90

    hm = heat_map(students, data, timeframe="semester")
    assert hm.days == 30
    assert len(hm.cells) == 2 * 30
    assert len(hm.day_labels) == 30
    assert all(0 <= c.value <= 100 for c in hm.cells)


def test_time_spent_can_exceed_scale():
    hm = heat_map([_student(1)], [_record("student-1", 0, minutes=132)], metric="time_spent", timeframe="week")
    assert hm.cells[0].value == 110.0
    assert hm.cells[0].band == "excellent"


def test_patterns_and_peak_times():
    students = [
        _student(1, risk="low", trend="improving"),
        _student(2, risk="medium", trend="declining"),
        _student(3, risk="high", trend="declining"),
    ]
    p = engagement_patterns(students)
    assert (p.high_engagement, p.medium_engagement, p.low_engagement) == (1, 1, 1)
    assert (p.improving, p.declining) == (1, 2)

    hm = heat_map(students, [], timeframe="week")
    assert [t.time for t in hm.peak_times] == ["10:00 AM", "2:00 PM", "4:00 PM"]


def test_generated_engagement_is_seeded():
    students = [_student(1, risk="high")]
    a = engagement_data(students, "week", random.Random(7))
    b = engagement_data(students, "week", random.Random(7))
    assert [r.engagement_score for r in a] == [r.engagement_score for r in b]
    assert all(10 <= r.engagement_score <= 50 for r in a)
