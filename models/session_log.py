"""Session documentation and logging models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import Field

from models.base import CamelModel

ObservationCategory = Literal[
    "positive", "concern", "neutral", "achievement", "improvement", "challenge",
]
Visibility = Literal["teacher_only", "admin_visible", "parent_visible", "student_visible"]
InterventionType = Literal[
    "warning", "restriction", "redirection", "support", "escalation", "emergency",
]
InterventionOutcome = Literal["successful", "partially_successful", "unsuccessful", "pending"]
IncidentType = Literal[
    "safety_concern", "harassment", "technical_failure",
    "policy_violation", "emergency_situation", "data_breach",
]
IncidentSeverity = Literal["minor", "moderate", "major", "severe"]
AdaptationType = Literal[
    "difficulty_adjustment", "time_modification", "activity_change",
    "group_restructure", "resource_addition",
]
LogExportFormat = Literal["json", "csv", "pdf"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


class LoggedParticipant(CamelModel):
    id: str
    name: str
    role: str = "participant"
    join_time: datetime = Field(default_factory=_utcnow)
    leave_time: datetime | None = None
    engagement_score: int = 75
    participation_minutes: int = 0
    interventions_received: int = 0
    violation_count: int = 0
    achievements_earned: list[str] = Field(default_factory=list)


class PhaseLog(CamelModel):
    id: str = Field(default_factory=_new_id)
    name: str
    start_time: datetime = Field(default_factory=_utcnow)
    end_time: datetime | None = None
    planned_duration: int = 0  # minutes
    actual_duration: int | None = None
    completion_status: Literal["completed", "skipped", "interrupted", "extended"] = "completed"
    participant_count: int = 0
    average_engagement: float = 0.0
    notes: str = ""


class InterventionLog(CamelModel):
    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    type: InterventionType
    participant_id: str
    participant_name: str = ""
    reason: str
    action: str
    severity: Literal["low", "medium", "high", "critical"] = "low"
    outcome: InterventionOutcome = "pending"
    follow_up_required: bool = False
    follow_up_completed: bool = False
    follow_up_notes: str | None = None


class ObservationNote(CamelModel):
    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    category: ObservationCategory = "neutral"
    participant_id: str | None = None
    participant_name: str | None = None
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    visibility: Visibility = "teacher_only"
    priority: Literal["low", "medium", "high"] = "medium"
    follow_up_needed: bool = False
    follow_up_date: datetime | None = None
    is_confidential: bool = False


class IncidentFollowUp(CamelModel):
    id: str = Field(default_factory=_new_id)
    action: str
    assigned_to: str
    due_date: datetime
    completed: bool = False
    completion_date: datetime | None = None
    notes: str | None = None


class CriticalIncident(CamelModel):
    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    type: IncidentType
    severity: IncidentSeverity
    title: str
    description: str
    involved_participants: list[str] = Field(default_factory=list)
    immediate_actions: list[str] = Field(default_factory=list)
    report_status: Literal["draft", "submitted", "under_review", "resolved", "escalated"] = "draft"
    reported_by: str
    follow_up_actions: list[IncidentFollowUp] = Field(default_factory=list)
    requires_external_report: bool = False
    documentation_complete: bool = False
    confidentiality_level: Literal["public", "internal", "restricted", "confidential"] = "internal"
    legal_implications: bool = False


class AdaptationLog(CamelModel):
    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    type: AdaptationType
    reason: str
    description: str
    effectiveness: Literal["positive", "negative", "neutral", "unknown"] = "unknown"
    would_repeat: bool = False
    notes: str = ""


class SessionLogMetadata(CamelModel):
    total_messages: int = 0
    average_engagement: float = 75.0
    technical_issues: int = 0
    escalations: int = 0
    completion_rate: float = 0.0


class SessionLog(CamelModel):
    id: str
    session_id: str
    session_title: str
    start_time: datetime = Field(default_factory=_utcnow)
    end_time: datetime | None = None
    duration: int = 0  # minutes
    teacher_id: str
    teacher_name: str
    is_live: bool = True
    participants: list[LoggedParticipant] = Field(default_factory=list)
    phases: list[PhaseLog] = Field(default_factory=list)
    interventions: list[InterventionLog] = Field(default_factory=list)
    observations: list[ObservationNote] = Field(default_factory=list)
    incidents: list[CriticalIncident] = Field(default_factory=list)
    adaptations: list[AdaptationLog] = Field(default_factory=list)
    metadata: SessionLogMetadata = Field(default_factory=SessionLogMetadata)
    is_locked: bool = False
    lock_reason: str | None = None
    locked_by: str | None = None
    locked_at: datetime | None = None


class QuickFillField(CamelModel):
    field: str
    options: list[str] = Field(default_factory=list)


class LoggingTemplate(CamelModel):
    id: str
    name: str
    type: Literal["observation", "intervention", "incident"]
    category: str
    template: str
    quick_fill_fields: list[QuickFillField] = Field(default_factory=list)
    auto_tags: list[str] = Field(default_factory=list)
    default_visibility: str = "teacher_only"
    requires_follow_up: bool = False


class ObservationFilters(CamelModel):
    category: str = ""
    participant: str = ""
    search: str = ""


# ── Requests ─────────────────────────────────────────────────


class SessionLogCreate(CamelModel):
    session_title: str
    participants: list[LoggedParticipant] = Field(default_factory=list)
    is_live: bool = True


class ObservationCreate(CamelModel):
    content: str
    category: ObservationCategory = "neutral"
    participant_id: str | None = None
    visibility: Visibility = "teacher_only"


class IncidentCreate(CamelModel):
    title: str
    description: str
    type: IncidentType = "policy_violation"
    severity: IncidentSeverity = "minor"
    involved_participants: list[str] = Field(default_factory=list)


class InterventionCreate(CamelModel):
    type: InterventionType
    participant_id: str
    reason: str
    action: str
    severity: Literal["low", "medium", "high", "critical"] = "low"
    outcome: InterventionOutcome = "pending"
    follow_up_required: bool = False


class AdaptationCreate(CamelModel):
    type: AdaptationType
    reason: str
    description: str
    effectiveness: Literal["positive", "negative", "neutral", "unknown"] = "unknown"
    would_repeat: bool = False
    notes: str = ""


class LockRequest(CamelModel):
    reason: str


class ParticipantTally(CamelModel):
    participant_id: str
    name: str
    observations: int = 0
    interventions: int = 0
    incidents: int = 0


class SessionLogSummary(CamelModel):
    observations_by_category: dict[str, int] = Field(default_factory=dict)
    interventions_by_outcome: dict[str, int] = Field(default_factory=dict)
    incidents: int = 0
    pending_follow_ups: int = 0
    participants: list[ParticipantTally] = Field(default_factory=list)
