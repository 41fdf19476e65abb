"""Student reflection review models."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from models.base import CamelModel, UtcDatetime

ReviewStatus = Literal["pending", "reviewed", "needs_revision"]
Priority = Literal["high", "medium", "low"]
ReflectionSortKey = Literal[
    "submitted_date", "student_name", "quality_score", "priority", "word_count",
]
BulkAction = Literal["mark_reviewed", "request_revision", "export"]


class ReflectionSummary(CamelModel):
    id: str
    student_name: str
    student_id: str
    debate_title: str
    submitted_at: UtcDatetime
    review_status: ReviewStatus = "pending"
    quality_score: float = 0.0
    word_count: int = 0
    time_spent: int = 0  # minutes
    teacher_priority: Priority = "medium"
    last_reviewed: UtcDatetime | None = None
    teacher_feedback: str | None = None
    flagged_concerns: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)


class QualityMetrics(CamelModel):
    depth: float = 0.0
    clarity: float = 0.0
    engagement: float = 0.0
    self_awareness: float = 0.0


class ReflectionAnalysis(CamelModel):
    sentiment: Literal["positive", "negative", "neutral"] = "neutral"
    key_insights: list[str] = Field(default_factory=list)
    quality_metrics: QualityMetrics = Field(default_factory=QualityMetrics)


class ReflectionResponse(CamelModel):
    question_id: str
    question_text: str
    response: str
    analysis_data: ReflectionAnalysis | None = None


class AIInsights(CamelModel):
    overall_sentiment: str = ""
    learning_evidence: list[str] = Field(default_factory=list)
    growth_areas: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)


class ReflectionContent(CamelModel):
    id: str
    responses: list[ReflectionResponse] = Field(default_factory=list)
    ai_insights: AIInsights = Field(default_factory=AIInsights)


class TeacherFeedback(CamelModel):
    """POST /api/reflections/{id}/feedback — request body."""

    overall_rating: int | None = Field(default=None, ge=1, le=5)
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    specific_comments: str = ""
    next_steps: str = ""
    encouragement: str = ""
    flag_for_follow_up: bool = False


class ReviewStats(CamelModel):
    total: int = 0
    pending: int = 0
    reviewed: int = 0
    needs_revision: int = 0
    high_priority: int = 0


class ReflectionQuery(CamelModel):
    search: str = ""
    status: str = "all"
    priority: str = "all"
    sort_by: str = "submitted_date"


class BulkActionRequest(CamelModel):
    ids: list[str] = Field(default_factory=list)
    action: BulkAction


class BulkActionResult(CamelModel):
    action: str
    affected: int = 0
    csv: str | None = None
