"""Report generator — summaries over selected students, CSV export, schedules."""

from __future__ import annotations

import csv
import io
import logging
import uuid
from collections import Counter

from errors import NotFoundError
from models.analytics import StudentSummary
from models.classes import ClassOverview
from models.reports import (
    GeneratedReport,
    ReportConfig,
    ReportSection,
    ReportStudentRow,
    ReportSummary,
    ScheduledReport,
    ScheduledReportCreate,
)
from models.user import CurrentUser
from services import mock_data
from services.notifications import NotificationStore, get_notification_center

logger = logging.getLogger(__name__)

REPORT_TITLES = {
    "individual": "Individual Student Report",
    "class_summary": "Class Performance Summary",
    "parent_conference": "Parent Conference Report",
    "administrative": "Administrative Overview",
}

CSV_HEADER = [
    "Student", "Overall Progress", "Average Quality", "Completed Reflections",
    "Risk Level", "Engagement Trend",
]


def report_title(report_type: str) -> str:
    return REPORT_TITLES.get(report_type, "Report")


def selected_students(config: ReportConfig, students: list[StudentSummary]) -> list[StudentSummary]:
    if not config.selected_students:
        return list(students)
    wanted = set(config.selected_students)
    return [s for s in students if s.id in wanted]


def summarize(students: list[StudentSummary]) -> ReportSummary:
    total = len(students)
    if not total:
        return ReportSummary()
    return ReportSummary(
        total_students=total,
        average_performance=round(sum(s.overall_progress for s in students) / total * 100, 1),
        engagement_rate=round(sum(1 for s in students if s.risk_level != "high") / total * 100, 1),
        completed_reflections=sum(s.completed_reflections for s in students),
        improvements=sum(1 for s in students if s.engagement_trend == "improving"),
        concerns=sum(1 for s in students if s.risk_level == "high"),
    )


def _rows(students: list[StudentSummary], anonymized: bool) -> list[ReportStudentRow]:
    return [
        ReportStudentRow(
            id=f"anon-{i}" if anonymized else s.id,
            name=f"Student #{i}" if anonymized else s.name,
            overall_progress=round(s.overall_progress * 100, 1),
            average_quality=round(s.average_quality * 100, 1),
            completed_reflections=s.completed_reflections,
            risk_level=s.risk_level,
            engagement_trend=s.engagement_trend,
        )
        for i, s in enumerate(students, start=1)
    ]


def _sections(
    config: ReportConfig,
    summary: ReportSummary,
    students: list[StudentSummary],
    rows: list[ReportStudentRow],
) -> list[ReportSection]:
    metrics = config.include_metrics
    sections = []
    if metrics.performance:
        sections.append(ReportSection(
            title="Performance Overview",
            content=(
                f"Average overall progress across {summary.total_students} students "
                f"is {summary.average_performance:.1f}%."
            ),
        ))
    if metrics.engagement:
        sections.append(ReportSection(
            title="Engagement Analysis",
            content=f"{summary.engagement_rate:.1f}% of students are actively engaged.",
        ))
    if metrics.reflections:
        quality = (
            sum(s.average_quality for s in students) / len(students) * 100 if students else 0.0
        )
        sections.append(ReportSection(
            title="Reflections",
            content=(
                f"{summary.completed_reflections} reflections completed "
                f"with an average quality of {quality:.0f}%."
            ),
        ))
    if metrics.achievements:
        strengths = Counter(skill for s in students for skill in s.strengths)
        top = ", ".join(skill for skill, _ in strengths.most_common(3)) or "none recorded"
        sections.append(ReportSection(title="Achievements", content=f"Most common strengths: {top}."))
    if metrics.improvements:
        sections.append(ReportSection(
            title="Areas of Growth",
            content=f"{summary.improvements} students show an improving engagement trend.",
        ))
    if metrics.concerns:
        flagged = [r.name for r in rows if r.risk_level == "high"]
        content = f"{summary.concerns} students are at high risk"
        content += f": {', '.join(flagged)}." if flagged else "."
        sections.append(ReportSection(title="Concerns", content=content))
    return sections


def _recommendations(summary: ReportSummary, students: list[StudentSummary]) -> list[str]:
    recs = []
    if summary.concerns:
        recs.append("Schedule one-on-one check-ins with high-risk students.")
    if any(s.engagement_trend == "declining" for s in students):
        recs.append("Review participation of students with declining engagement.")
    attention = Counter(skill for s in students for skill in s.needs_attention)
    if attention:
        skill, _ = attention.most_common(1)[0]
        recs.append(f"Plan targeted practice on {skill}.")
    return recs


def generate(
    config: ReportConfig,
    class_data: ClassOverview | None,
    students: list[StudentSummary],
) -> GeneratedReport:
    chosen = selected_students(config, students)
    summary = summarize(chosen)
    rows = _rows(chosen, config.anonymized)
    return GeneratedReport(
        title=report_title(config.type),
        type=config.type,
        class_name=class_data.class_name if class_data else None,
        date_range=config.date_range,
        format=config.format,
        summary=summary,
        sections=_sections(config, summary, chosen, rows),
        students=rows,
        recommendations=_recommendations(summary, chosen) if config.include_recommendations else [],
    )


def export_csv(report: GeneratedReport) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for r in report.students:
        writer.writerow([
            r.name,
            f"{r.overall_progress:.1f}",
            f"{r.average_quality:.1f}",
            r.completed_reflections,
            r.risk_level,
            r.engagement_trend,
        ])
    return buf.getvalue()


class ReportService:
    """Report generation plus the list of scheduled reports."""

    def __init__(self, notifications: NotificationStore | None = None):
        self._notifications = notifications
        self._scheduled = mock_data.get_scheduled_reports()

    @property
    def notifications(self) -> NotificationStore:
        return self._notifications or get_notification_center()

    async def generate(
        self,
        config: ReportConfig,
        class_data: ClassOverview | None,
        students: list[StudentSummary],
        user: CurrentUser,
    ) -> GeneratedReport:
        report = generate(config, class_data, students)
        await self.notifications.add(
            user.user_id, "success", "Report Generated", f'"{report.title}" is ready.',
        )
        logger.info(
            "Report %s generated for %d students by %s",
            config.type, report.summary.total_students, user.user_id,
        )
        return report

    def list_scheduled(self) -> list[ScheduledReport]:
        return list(self._scheduled)

    def add_scheduled(self, req: ScheduledReportCreate) -> ScheduledReport:
        report = ScheduledReport(id=uuid.uuid4().hex[:8], **req.model_dump())
        self._scheduled.append(report)
        return report

    def remove_scheduled(self, report_id: str) -> None:
        before = len(self._scheduled)
        self._scheduled = [r for r in self._scheduled if r.id != report_id]
        if len(self._scheduled) == before:
            raise NotFoundError("scheduled_report", report_id)


_service: ReportService | None = None


def get_report_service() -> ReportService:
    global _service
    if _service is None:
        _service = ReportService()
    return _service
