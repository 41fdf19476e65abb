"""Report generator models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Literal

from pydantic import Field

from models.analytics import StudentSummary
from models.base import CamelModel, UtcDatetime
from models.classes import ClassOverview

ReportType = Literal["individual", "class_summary", "parent_conference", "administrative"]
ReportFormat = Literal["pdf", "csv", "excel"]


def _thirty_days_ago() -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=30)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReportDateRange(CamelModel):
    start: UtcDatetime = Field(default_factory=_thirty_days_ago)
    end: UtcDatetime = Field(default_factory=_utcnow)


class ReportMetrics(CamelModel):
    performance: bool = True
    engagement: bool = True
    reflections: bool = True
    achievements: bool = True
    improvements: bool = True
    concerns: bool = True


class ReportConfig(CamelModel):
    type: ReportType = "class_summary"
    date_range: ReportDateRange = Field(default_factory=ReportDateRange)
    selected_students: list[str] = Field(default_factory=list)
    include_metrics: ReportMetrics = Field(default_factory=ReportMetrics)
    format: ReportFormat = "pdf"
    include_comments: bool = True
    include_recommendations: bool = True
    anonymized: bool = False


class ReportRequest(CamelModel):
    """POST /api/reports/generate — request body."""

    config: ReportConfig = Field(default_factory=ReportConfig)
    class_data: ClassOverview | None = None
    students: list[StudentSummary] | None = None


class ReportSummary(CamelModel):
    total_students: int = 0
    average_performance: float = 0.0
    engagement_rate: float = 0.0
    completed_reflections: int = 0
    improvements: int = 0
    concerns: int = 0


class ReportStudentRow(CamelModel):
    id: str
    name: str
    overall_progress: float
    average_quality: float
    completed_reflections: int
    risk_level: str
    engagement_trend: str


class ReportSection(CamelModel):
    title: str
    content: str


class GeneratedReport(CamelModel):
    title: str
    type: ReportType
    class_name: str | None = None
    generated_at: datetime = Field(default_factory=_utcnow)
    date_range: ReportDateRange
    format: ReportFormat
    summary: ReportSummary
    sections: list[ReportSection] = Field(default_factory=list)
    students: list[ReportStudentRow] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class ScheduledReport(CamelModel):
    id: str
    name: str
    schedule: str
    recipients: list[str] = Field(default_factory=list)
    last_sent: datetime | None = None


class ScheduledReportCreate(CamelModel):
    name: str
    schedule: str
    recipients: list[str] = Field(default_factory=list)
