"""Teacher analytics dashboard and engagement heat map.

The backend supplies the class list, per-class performance rows and the
pending reflection queue.  Per-student summaries, activity and engagement
records are generated, so every generator takes a ``random.Random``.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable
from datetime import datetime, timedelta, timezone
from typing import Any

from adapters.class_adapter import get_class_performance, list_teacher_classes, parse_class
from adapters.reflection_adapter import list_pending_reflections
from errors import UpstreamError
from models.analytics import (
    EngagementPatterns,
    EngagementRecord,
    HeatMap,
    HeatMapCell,
    Insight,
    PeakTime,
    StudentSummary,
    TeacherDashboardData,
)
from models.classes import ClassOverview
from models.reflections import ReflectionSummary
from models.user import CurrentUser
from services import mock_data
from services.backend_client import BackendClient, get_backend_client
from services.fallback import should_use_mock

logger = logging.getLogger(__name__)

MAX_DISPLAY_DAYS = 30
TIME_SPENT_CEILING = 120  # minutes that count as 100%

PEAK_TIMES = [
    PeakTime(time="10:00 AM", score=85, activity="Morning debates"),
    PeakTime(time="2:00 PM", score=78, activity="Afternoon reflections"),
    PeakTime(time="4:00 PM", score=65, activity="Peer discussions"),
]


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def build_insights(
    students: list[StudentSummary], reflections: list[ReflectionSummary]
) -> list[Insight]:
    insights: list[Insight] = []

    declining = [s.id for s in students if s.engagement_trend == "declining"]
    if declining:
        insights.append(Insight(
            type="warning",
            title="Students Need Attention",
            description=f"{len(declining)} students showing declining engagement patterns",
            actionable=True,
            students=declining,
        ))

    if students:
        average = sum(s.overall_progress for s in students) / len(students) * 100
        insights.append(Insight(
            type="success" if average >= 70 else "info",
            title="Class Average",
            description=f"Average overall progress is {average:.0f}%",
        ))

    pending = sum(1 for r in reflections if r.review_status == "pending")
    if pending:
        insights.append(Insight(
            type="info",
            title="Pending Reviews",
            description=f"{pending} reflections awaiting teacher review",
            actionable=True,
        ))
    return insights


async def _no_rows() -> list[Any]:
    return []


async def _fetch(
    user: CurrentUser, selected_class_id: str | None, client: BackendClient
) -> tuple[list[ClassOverview], list[dict[str, Any]]]:
    token = user.token or None
    perf: Awaitable[list[dict[str, Any]]] = (
        get_class_performance(client, selected_class_id, token=token)
        if selected_class_id else _no_rows()
    )
    classes, rows, pending = await asyncio.gather(
        list_teacher_classes(client, token=token),
        perf,
        list_pending_reflections(client, token=token),
        return_exceptions=True,
    )
    if isinstance(classes, BaseException):
        raise UpstreamError(f"Failed to fetch classes: {classes}") from classes
    if isinstance(rows, BaseException):
        logger.warning("Class performance unavailable for %s: %s", selected_class_id, rows)
        rows = []
    if isinstance(pending, BaseException):
        logger.warning("Pending reflections unavailable: %s", pending)
    return classes, rows


async def dashboard(
    user: CurrentUser,
    selected_class_id: str | None = None,
    client: BackendClient | None = None,
    rng: random.Random | None = None,
) -> TeacherDashboardData:
    """Assemble the analytics dashboard for *user*.

    With no class selected the first available class is chosen.  Only the
    class list is mandatory; the other upstream reads degrade to empty.
    """
    rng = rng or random.Random()

    if should_use_mock():
        classes = [parse_class(c) for c in mock_data.CLASSES]
        rows: list[dict[str, Any]] = []
    else:
        client = client or get_backend_client()
        classes, rows = await _fetch(user, selected_class_id, client)
        if not selected_class_id and classes:
            try:
                rows = await get_class_performance(client, classes[0].class_id, token=user.token or None)
            except Exception as exc:
                logger.warning("Class performance unavailable for %s: %s", classes[0].class_id, exc)

    if not selected_class_id and classes:
        selected_class_id = classes[0].class_id

    selected = next((c for c in classes if c.class_id == selected_class_id), None)
    if selected is not None:
        selected = selected.model_copy(update={"upcoming_deadlines": 3})
        if rows:
            selected.active_students = len(rows)

    students = mock_data.generate_students(rng)
    reflections = mock_data.generate_reflections(rng)
    return TeacherDashboardData(
        selected_class=selected,
        available_classes=classes,
        students=students,
        pending_reflections=reflections,
        recent_activity=mock_data.generate_activity(rng),
        insights=build_insights(students, reflections),
    )


# ---------------------------------------------------------------------------
# Engagement heat map
# ---------------------------------------------------------------------------

def timeframe_days(timeframe: str) -> int:
    if timeframe == "week":
        return 7
    if timeframe == "month":
        return 30
    return 90


def engagement_data(
    students: list[StudentSummary], timeframe: str, rng: random.Random
) -> list[EngagementRecord]:
    return mock_data.generate_engagement(students, timeframe_days(timeframe), rng)


def band(value: float) -> str:
    if value >= 80:
        return "excellent"
    if value >= 60:
        return "high"
    if value >= 40:
        return "good"
    if value >= 20:
        return "medium"
    if value > 0:
        return "low"
    return "none"


def metric_value(record: EngagementRecord, metric: str) -> float:
    if metric == "debate_participation":
        return record.activities.debate_participation
    if metric == "reflection_activity":
        return record.activities.reflection_activity
    if metric == "peer_interaction":
        return record.activities.peer_interaction
    if metric == "time_spent":
        return record.time_spent / TIME_SPENT_CEILING * 100
    return record.engagement_score


def engagement_patterns(students: list[StudentSummary]) -> EngagementPatterns:
    return EngagementPatterns(
        high_engagement=sum(1 for s in students if s.risk_level == "low"),
        medium_engagement=sum(1 for s in students if s.risk_level == "medium"),
        low_engagement=sum(1 for s in students if s.risk_level == "high"),
        improving=sum(1 for s in students if s.engagement_trend == "improving"),
        declining=sum(1 for s in students if s.engagement_trend == "declining"),
    )


def peak_times() -> list[PeakTime]:
    return list(PEAK_TIMES)


def heat_map(
    students: list[StudentSummary],
    data: list[EngagementRecord],
    metric: str = "overall_engagement",
    timeframe: str = "month",
) -> HeatMap:
    """One cell per student per day, newest day first; missing days are 0."""
    days = min(timeframe_days(timeframe), MAX_DISPLAY_DAYS)
    by_key = {(r.student_id, r.day_offset): r for r in data}
    if data:
        today = data[0].date + timedelta(days=data[0].day_offset)
    else:
        today = datetime.now(timezone.utc).date()

    cells = []
    for student in students:
        for day in range(days):
            record = by_key.get((student.id, day))
            value = metric_value(record, metric) if record else 0.0
            cells.append(HeatMapCell(
                student_id=student.id,
                student=student.name,
                day=day,
                date=today - timedelta(days=day),
                value=round(value, 1),
                band=band(value),
            ))

    label_days = 7 if timeframe == "week" else MAX_DISPLAY_DAYS
    labels = [
        f"{d:%b} {d.day}"
        for d in (today - timedelta(days=i) for i in range(label_days))
    ]
    labels.reverse()

    return HeatMap(
        metric=metric,
        timeframe=timeframe,
        days=days,
        day_labels=labels,
        cells=cells,
        patterns=engagement_patterns(students),
        peak_times=peak_times(),
    )
