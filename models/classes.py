"""Class overview and detail models."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from models.base import CamelModel

ClassStatus = Literal["draft", "active", "completed", "archived"]


class ClassOverview(CamelModel):
    """One row of the class selector on the analytics dashboard."""

    class_id: str
    class_name: str
    total_students: int = 0
    active_students: int = 0
    average_engagement: float = 0.0
    completion_rate: float = 0.0
    overall_class_average: float = 0.0
    last_activity: datetime | None = None
    upcoming_deadlines: int = 0


class TeacherRef(CamelModel):
    id: str
    name: str = ""
    email: str = ""


class OrganizationRef(CamelModel):
    id: str
    name: str = ""


class RecentDebate(CamelModel):
    id: str
    topic: str
    date: datetime
    participant_count: int = 0
    status: Literal["completed", "in_progress", "scheduled"] = "scheduled"


class MeetingTime(CamelModel):
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str


class ClassSchedule(CamelModel):
    meeting_times: list[MeetingTime] = Field(default_factory=list)
    room: str | None = None
    virtual_meeting_url: str | None = None


class ClassDetail(CamelModel):
    id: str
    name: str
    description: str | None = None
    subject: str = ""
    grade_level: str = ""
    academic_year: str = ""
    term: str = ""
    max_students: int = 0
    current_enrollment: int = 0
    is_active: bool = True
    status: ClassStatus = "active"
    teacher: TeacherRef
    organization: OrganizationRef
    created_at: datetime
    updated_at: datetime
    last_activity: datetime | None = None

    average_engagement: float | None = None
    total_debates: int | None = None
    completion_rate: float | None = None
    average_score: float | None = None
    participation_rate: float | None = None

    recent_debates: list[RecentDebate] = Field(default_factory=list)
    schedule: ClassSchedule | None = None


class FormattedMeeting(CamelModel):
    day: str
    start_time: str
    end_time: str


class ClassDetailView(CamelModel):
    """GET /api/classes/{id} — detail plus the labels the view renders."""

    class_data: ClassDetail
    status_badge: str
    formatted_schedule: list[FormattedMeeting] = Field(default_factory=list)
    source: Literal["backend", "mock"] = "backend"
