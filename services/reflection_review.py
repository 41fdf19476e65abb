"""Reflection review — filter/sort the queue, stats, feedback, bulk actions."""

from __future__ import annotations

import csv
import io
import logging
import random
from datetime import datetime, timezone

from adapters.reflection_adapter import list_pending_reflections
from errors import NotFoundError, ValidationFailedError
from models.reflections import (
    BulkActionResult,
    ReflectionContent,
    ReflectionQuery,
    ReflectionSummary,
    ReviewStats,
    TeacherFeedback,
)
from models.user import CurrentUser
from services import mock_data
from services.backend_client import BackendClient, get_backend_client
from services.fallback import fall_back, should_use_mock
from services.notifications import NotificationStore, get_notification_center

logger = logging.getLogger(__name__)

_PRIORITY_RANK = {"high": 3, "medium": 2, "low": 1}

CSV_HEADER = ["Student", "Debate", "Submitted", "Status", "Priority", "Quality", "Words"]


def filter_and_sort(
    reflections: list[ReflectionSummary], query: ReflectionQuery
) -> list[ReflectionSummary]:
    result = list(reflections)

    if query.search:
        needle = query.search.lower()
        result = [
            r for r in result
            if needle in r.student_name.lower() or needle in r.debate_title.lower()
        ]
    if query.status != "all":
        result = [r for r in result if r.review_status == query.status]
    if query.priority != "all":
        result = [r for r in result if r.teacher_priority == query.priority]

    if query.sort_by == "submitted_date":
        result.sort(key=lambda r: r.submitted_at, reverse=True)
    elif query.sort_by == "student_name":
        result.sort(key=lambda r: r.student_name)
    elif query.sort_by == "quality_score":
        result.sort(key=lambda r: r.quality_score, reverse=True)
    elif query.sort_by == "priority":
        result.sort(key=lambda r: _PRIORITY_RANK.get(r.teacher_priority, 0), reverse=True)
    elif query.sort_by == "word_count":
        result.sort(key=lambda r: r.word_count, reverse=True)
    return result


def review_stats(reflections: list[ReflectionSummary]) -> ReviewStats:
    return ReviewStats(
        total=len(reflections),
        pending=sum(1 for r in reflections if r.review_status == "pending"),
        reviewed=sum(1 for r in reflections if r.review_status == "reviewed"),
        needs_revision=sum(1 for r in reflections if r.review_status == "needs_revision"),
        high_priority=sum(1 for r in reflections if r.teacher_priority == "high"),
    )


def to_csv(reflections: list[ReflectionSummary]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for r in reflections:
        writer.writerow([
            r.student_name,
            r.debate_title,
            r.submitted_at.isoformat(),
            r.review_status,
            r.teacher_priority,
            f"{r.quality_score:.2f}",
            r.word_count,
        ])
    return buf.getvalue()


class ReflectionReviewService:
    """Holds the review queue for this process.

    The queue is loaded once from the backend (or generated in mock mode)
    and then mutated in place by feedback and bulk actions.
    """

    def __init__(
        self,
        client: BackendClient | None = None,
        notifications: NotificationStore | None = None,
        rng: random.Random | None = None,
    ):
        self._client = client
        self._notifications = notifications
        self._rng = rng or random.Random()
        self._reflections: list[ReflectionSummary] | None = None
        self.source = "mock"

    @property
    def notifications(self) -> NotificationStore:
        return self._notifications or get_notification_center()

    def seed(self, reflections: list[ReflectionSummary]) -> None:
        self._reflections = list(reflections)

    async def reflections(self, user: CurrentUser) -> list[ReflectionSummary]:
        if self._reflections is not None:
            return self._reflections

        if should_use_mock():
            self._reflections = mock_data.generate_reflections(self._rng)
            self.source = "mock"
            return self._reflections

        client = self._client or get_backend_client()
        try:
            self._reflections = await list_pending_reflections(client, token=user.token or None)
            self.source = "backend"
        except Exception as exc:
            if not fall_back("reflection_review.load", exc):
                raise
            self._reflections = mock_data.generate_reflections(self._rng)
            self.source = "mock"
        return self._reflections

    def _find(self, reflection_id: str) -> ReflectionSummary:
        for r in self._reflections or []:
            if r.id == reflection_id:
                return r
        raise NotFoundError("reflection", reflection_id)

    async def query(self, user: CurrentUser, query: ReflectionQuery) -> list[ReflectionSummary]:
        return filter_and_sort(await self.reflections(user), query)

    async def stats(self, user: CurrentUser) -> ReviewStats:
        return review_stats(await self.reflections(user))

    async def get_content(self, reflection_id: str, user: CurrentUser) -> ReflectionContent:
        await self.reflections(user)
        self._find(reflection_id)
        return mock_data.get_reflection_content(reflection_id)

    async def save_feedback(
        self, reflection_id: str, feedback: TeacherFeedback, user: CurrentUser
    ) -> ReflectionSummary:
        if feedback.overall_rating is None:
            raise ValidationFailedError("An overall rating is required", field="overallRating")
        await self.reflections(user)
        reflection = self._find(reflection_id)
        reflection.review_status = "reviewed"
        reflection.teacher_feedback = feedback.specific_comments
        reflection.last_reviewed = datetime.now(timezone.utc)
        await self.notifications.add(
            user.user_id,
            "success",
            "Feedback Saved",
            f"Feedback for {reflection.student_name} has been saved.",
        )
        logger.info("Feedback saved for reflection %s by %s", reflection_id, user.user_id)
        return reflection

    async def bulk_action(self, ids: list[str], action: str, user: CurrentUser) -> BulkActionResult:
        if action not in ("mark_reviewed", "request_revision", "export"):
            raise ValidationFailedError(f"Unknown bulk action: {action}", field="action")
        if not ids:
            return BulkActionResult(action=action, affected=0)

        selected = [r for r in await self.reflections(user) if r.id in set(ids)]
        if action == "export":
            return BulkActionResult(action=action, affected=len(selected), csv=to_csv(selected))

        status = "reviewed" if action == "mark_reviewed" else "needs_revision"
        now = datetime.now(timezone.utc)
        for r in selected:
            r.review_status = status
            r.last_reviewed = now
        await self.notifications.add(
            user.user_id,
            "success",
            "Bulk Action Complete",
            f"{len(selected)} reflections updated.",
        )
        return BulkActionResult(action=action, affected=len(selected))


_service: ReflectionReviewService | None = None


def get_reflection_review_service() -> ReflectionReviewService:
    global _service
    if _service is None:
        _service = ReflectionReviewService()
    return _service
