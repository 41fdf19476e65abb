"""Toast-style notifications pushed to dashboard users."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import Field

from models.base import CamelModel

NotificationType = Literal["success", "error", "warning", "info"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Notification(CamelModel):
    id: str = Field(default_factory=lambda: f"ntf-{uuid.uuid4().hex[:12]}")
    type: NotificationType
    title: str
    message: str
    read: bool = False
    timestamp: datetime = Field(default_factory=_utcnow)


class NotificationCreate(CamelModel):
    """POST /api/notifications — request body."""

    type: NotificationType
    title: str
    message: str = ""
