"""Debate session models: topics, student profiles, wizard drafts, session list."""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import Field

from models.base import CamelModel, UtcDatetime

Difficulty = Literal["beginner", "intermediate", "advanced"]
DebateFormatId = Literal["oxford", "lincoln-douglas", "parliamentary", "fishbowl", "socratic"]
SessionStatus = Literal["draft", "scheduled", "live", "completed", "cancelled"]


# ── Topics & students ────────────────────────────────────────


class TopicAppropriateness(CamelModel):
    min_grade: int = 6
    max_grade: int = 12
    content_warnings: list[str] = Field(default_factory=list)


class DebateTopic(CamelModel):
    id: str
    title: str
    description: str = ""
    difficulty: Difficulty = "intermediate"
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    estimated_duration: int = 45  # minutes
    preparation_materials: list[str] = Field(default_factory=list)
    learning_objectives: list[str] = Field(default_factory=list)
    appropriateness: TopicAppropriateness = Field(default_factory=TopicAppropriateness)


class DebateHistory(CamelModel):
    total_debates: int = 0
    win_rate: float = 0
    average_score: float = 0
    preferred_topics: list[str] = Field(default_factory=list)


class StudentPreferences(CamelModel):
    partner_preferences: list[str] = Field(default_factory=list)
    topic_interests: list[str] = Field(default_factory=list)
    learning_style: str = ""


class StudentProfile(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: str = ""
    avatar: str | None = None
    grade: str = ""
    class_id: str = ""
    skill_level: dict[str, float] = Field(default_factory=dict)
    debate_history: DebateHistory = Field(default_factory=DebateHistory)
    availability: list[str] = Field(default_factory=list)
    preferences: StudentPreferences = Field(default_factory=StudentPreferences)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def average_skill(self) -> float:
        if not self.skill_level:
            return 0.0
        return sum(self.skill_level.values()) / len(self.skill_level)


# ── Wizard draft ─────────────────────────────────────────────


class SessionPhases(CamelModel):
    preparation: int = 10
    opening: int = 8
    rebuttal: int = 15
    closing: int = 8
    reflection: int = 4


class ModerationSettings(CamelModel):
    ai_coaching: bool = True
    intervention_level: Literal["minimal", "moderate", "active"] = "moderate"
    real_time_feedback: bool = True
    content_filtering: bool = True


class ScoringSettings(CamelModel):
    enabled: bool = True
    criteria: list[str] = Field(
        default_factory=lambda: ["argument_quality", "evidence_use", "presentation"]
    )
    peer_evaluation: bool = True
    self_reflection: bool = True


class SessionConfiguration(CamelModel):
    format: DebateFormatId = "oxford"
    duration: int = 45
    phases: SessionPhases = Field(default_factory=SessionPhases)
    moderation: ModerationSettings = Field(default_factory=ModerationSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)


class SessionPreparations(CamelModel):
    materials: list[str] = Field(default_factory=list)
    instructions: str = ""
    notifications: bool = True


class SessionDraft(CamelModel):
    """Everything the creation wizard collects before a session is created."""

    title: str = ""
    description: str = ""
    topic: DebateTopic | None = None
    participants: list[StudentProfile] = Field(default_factory=list)
    scheduled_date: date | None = None
    scheduled_time: str = ""
    configuration: SessionConfiguration = Field(default_factory=SessionConfiguration)
    template: str | None = None
    preparations: SessionPreparations = Field(default_factory=SessionPreparations)


class ParticipantRange(CamelModel):
    min: int
    max: int


class DebateFormat(CamelModel):
    id: DebateFormatId
    name: str
    description: str
    duration: int
    participants: ParticipantRange
    difficulty: Difficulty


class WizardStep(CamelModel):
    id: str
    title: str
    description: str
    is_complete: bool = False


class MatchingSuggestion(CamelModel):
    students: list[StudentProfile]
    score: int
    reasoning: str


class TopicFilters(CamelModel):
    search: str = ""
    difficulty: str = ""
    category: str = ""
    grade: str = ""


class ParticipantFilters(CamelModel):
    search: str = ""
    class_id: str = Field(default="", alias="class")


# ── Session list ─────────────────────────────────────────────


class SessionTopicRef(CamelModel):
    id: str
    title: str
    category: str = ""
    difficulty: str = ""


class SessionParticipant(CamelModel):
    id: str
    first_name: str
    last_name: str
    avatar: str | None = None
    role: Literal["participant", "observer"] = "participant"


class SessionTeacherRef(CamelModel):
    id: str
    name: str = ""


class SessionListConfiguration(CamelModel):
    format: str = ""
    ai_coaching: bool = False
    recording: bool = False
    scoring: bool = False


class SessionAnalytics(CamelModel):
    engagement: float = 0
    participation: float = 0
    completion_rate: float = 0


class DebateSession(CamelModel):
    id: str
    title: str
    description: str = ""
    topic: SessionTopicRef
    format: str
    status: SessionStatus
    scheduled_date: UtcDatetime
    scheduled_time: str = ""
    duration: int = 0
    participants: list[SessionParticipant] = Field(default_factory=list)
    teacher: SessionTeacherRef
    configuration: SessionListConfiguration = Field(default_factory=SessionListConfiguration)
    analytics: SessionAnalytics | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class SessionFilters(CamelModel):
    search: str = ""
    status: str = ""
    format: str = ""
    date_range: str = ""


SessionTab = Literal["upcoming", "live", "completed", "all"]
SessionAction = Literal["view", "edit", "duplicate", "start", "monitor", "archive", "delete"]
