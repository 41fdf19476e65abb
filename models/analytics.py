"""Teacher analytics dashboard and engagement heat map models."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import Field

from models.base import CamelModel
from models.classes import ClassOverview
from models.reflections import ReflectionSummary

RiskLevel = Literal["low", "medium", "high"]
EngagementTrend = Literal["improving", "stable", "declining"]
Timeframe = Literal["week", "month", "semester"]
HeatMapMetric = Literal[
    "overall_engagement",
    "debate_participation",
    "reflection_activity",
    "peer_interaction",
    "time_spent",
]
HeatBand = Literal["excellent", "high", "good", "medium", "low", "none"]


class StudentSummary(CamelModel):
    id: str
    name: str
    email: str = ""
    overall_progress: float = 0.0  # 0-1
    last_activity: datetime | None = None
    completed_reflections: int = 0
    average_quality: float = 0.0  # 0-1
    risk_level: RiskLevel = "low"
    strengths: list[str] = Field(default_factory=list)
    needs_attention: list[str] = Field(default_factory=list)
    engagement_trend: EngagementTrend = "stable"


class ActivityItem(CamelModel):
    type: str
    description: str
    timestamp: datetime
    student_id: str | None = None
    priority: Literal["low", "medium", "high"] = "low"


class Insight(CamelModel):
    type: Literal["success", "warning", "info"]
    title: str
    description: str
    actionable: bool = False
    students: list[str] | None = None


class TeacherDashboardData(CamelModel):
    selected_class: ClassOverview | None = None
    available_classes: list[ClassOverview] = Field(default_factory=list)
    students: list[StudentSummary] = Field(default_factory=list)
    pending_reflections: list[ReflectionSummary] = Field(default_factory=list)
    recent_activity: list[ActivityItem] = Field(default_factory=list)
    insights: list[Insight] = Field(default_factory=list)


# ── Engagement heat map ──────────────────────────────────────


class EngagementActivities(CamelModel):
    debate_participation: float = 0.0
    reflection_activity: float = 0.0
    peer_interaction: float = 0.0
    resource_access: float = 0.0


class EngagementQuality(CamelModel):
    message_quality: float = 0.0
    response_depth: float = 0.0
    collaboration_score: float = 0.0


class EngagementRecord(CamelModel):
    student_id: str
    day_offset: int  # 0 = today, 1 = yesterday...
    date: date
    engagement_score: float
    activities: EngagementActivities = Field(default_factory=EngagementActivities)
    time_spent: int = 0  # minutes
    quality_metrics: EngagementQuality = Field(default_factory=EngagementQuality)


class HeatMapCell(CamelModel):
    student_id: str
    student: str
    day: int
    date: date
    value: float
    band: HeatBand


class EngagementPatterns(CamelModel):
    high_engagement: int = 0
    medium_engagement: int = 0
    low_engagement: int = 0
    improving: int = 0
    declining: int = 0


class PeakTime(CamelModel):
    time: str
    score: int
    activity: str


class HeatMap(CamelModel):
    metric: HeatMapMetric
    timeframe: Timeframe
    days: int
    day_labels: list[str] = Field(default_factory=list)
    cells: list[HeatMapCell] = Field(default_factory=list)
    patterns: EngagementPatterns = Field(default_factory=EngagementPatterns)
    peak_times: list[PeakTime] = Field(default_factory=list)
