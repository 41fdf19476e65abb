"""Class detail view — load with mock fallback, schedule labels, share/archive."""

from __future__ import annotations

import logging

from adapters.class_adapter import get_class_detail
from errors import UpstreamError
from models.classes import ClassDetail, ClassDetailView, FormattedMeeting
from models.user import CurrentUser
from services import mock_data
from services.backend_client import BackendClient, get_backend_client
from services.fallback import fall_back, should_use_mock
from services.notifications import NotificationStore, get_notification_center

logger = logging.getLogger(__name__)

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

_STATUS_LABELS = {
    "draft": "Draft",
    "active": "Active",
    "completed": "Completed",
    "archived": "Archived",
}


def status_badge(status: str, is_active: bool) -> str:
    if not is_active:
        return "Inactive"
    return _STATUS_LABELS.get(status, status)


def formatted_schedule(detail: ClassDetail) -> list[FormattedMeeting]:
    if detail.schedule is None:
        return []
    return [
        FormattedMeeting(day=DAY_NAMES[m.day_of_week], start_time=m.start_time, end_time=m.end_time)
        for m in detail.schedule.meeting_times
    ]


def build_view(detail: ClassDetail, source: str) -> ClassDetailView:
    return ClassDetailView(
        class_data=detail,
        status_badge=status_badge(detail.status, detail.is_active),
        formatted_schedule=formatted_schedule(detail),
        source=source,
    )


class ClassDetailService:
    """Loads class detail and keeps local archive overrides.

    The backend has no archive endpoint yet, so archived ids are remembered
    in-process and applied on every load.
    """

    def __init__(
        self,
        client: BackendClient | None = None,
        notifications: NotificationStore | None = None,
    ):
        self._client = client
        self._notifications = notifications
        self._archived: set[str] = set()

    @property
    def notifications(self) -> NotificationStore:
        return self._notifications or get_notification_center()

    def _mock(self, class_id: str, user: CurrentUser) -> ClassDetail:
        return mock_data.get_class_detail(class_id, user.user_id, user.name, user.email)

    async def load(self, class_id: str, user: CurrentUser) -> ClassDetailView:
        if should_use_mock():
            detail, source = self._mock(class_id, user), "mock"
        else:
            client = self._client or get_backend_client()
            try:
                detail, source = await get_class_detail(client, class_id, token=user.token or None), "backend"
            except Exception as exc:
                if not fall_back("class_detail.load", exc):
                    raise UpstreamError(f"Failed to load class {class_id}: {exc}") from exc
                detail, source = self._mock(class_id, user), "mock"

        if class_id in self._archived:
            detail.status = "archived"
            detail.is_active = False
        return build_view(detail, source)

    async def share(self, class_id: str, user: CurrentUser) -> None:
        await self.notifications.add(
            user.user_id,
            "info",
            "Share Class",
            "Class sharing feature will be implemented in a future update.",
        )

    async def archive(self, class_id: str, user: CurrentUser) -> ClassDetailView:
        view = await self.load(class_id, user)
        self._archived.add(class_id)
        view.class_data.status = "archived"
        view.class_data.is_active = False
        view.status_badge = status_badge("archived", False)
        await self.notifications.add(
            user.user_id,
            "success",
            "Class Archived",
            f'"{view.class_data.name}" has been archived.',
        )
        logger.info("Class %s archived by %s", class_id, user.user_id)
        return view


_service: ClassDetailService | None = None


def get_class_detail_service() -> ClassDetailService:
    global _service
    if _service is None:
        _service = ClassDetailService()
    return _service
