"""Session documentation — observations, interventions, incidents, adaptations.

One :class:`SessionLog` per debate session, held in-process.  A locked log
is read-only: every write raises :class:`LockedError`.
"""

from __future__ import annotations

import asyncio
import csv
import io
import json
import logging
import random
from collections import Counter
from datetime import datetime, timedelta, timezone

from config.settings import get_settings
from errors import LockedError, NotFoundError, ValidationFailedError
from models.session_log import (
    AdaptationCreate,
    AdaptationLog,
    CriticalIncident,
    IncidentCreate,
    InterventionCreate,
    InterventionLog,
    LoggingTemplate,
    ObservationCreate,
    ObservationFilters,
    ObservationNote,
    ParticipantTally,
    SessionLog,
    SessionLogCreate,
    SessionLogSummary,
)
from models.user import CurrentUser
from services import mock_data
from services.fallback import should_use_mock
from services.notifications import NotificationStore, get_notification_center

logger = logging.getLogger(__name__)

OBSERVATION_TITLES = {
    "positive": "Positive Observation",
    "concern": "Area of Concern",
}

CSV_HEADER = ["Type", "Timestamp", "Participant", "Category", "Title", "Details"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def observation_title(category: str) -> str:
    return OBSERVATION_TITLES.get(category, "General Observation")


def filter_observations(
    observations: list[ObservationNote], filters: ObservationFilters
) -> list[ObservationNote]:
    needle = filters.search.lower()
    return [
        o for o in observations
        if (not filters.category or o.category == filters.category)
        and (not filters.participant or o.participant_id == filters.participant)
        and (not needle or needle in o.title.lower() or needle in o.content.lower())
    ]


def pending_follow_ups(log: SessionLog) -> int:
    notes = sum(1 for o in log.observations if o.follow_up_needed and o.follow_up_date is None)
    interventions = sum(
        1 for i in log.interventions if i.follow_up_required and not i.follow_up_completed
    )
    return notes + interventions


def summarize(log: SessionLog) -> SessionLogSummary:
    tallies = {
        p.id: ParticipantTally(participant_id=p.id, name=p.name) for p in log.participants
    }
    for o in log.observations:
        if o.participant_id in tallies:
            tallies[o.participant_id].observations += 1
    for i in log.interventions:
        if i.participant_id in tallies:
            tallies[i.participant_id].interventions += 1
    for inc in log.incidents:
        for pid in inc.involved_participants:
            if pid in tallies:
                tallies[pid].incidents += 1

    return SessionLogSummary(
        observations_by_category=dict(Counter(o.category for o in log.observations)),
        interventions_by_outcome=dict(Counter(i.outcome for i in log.interventions)),
        incidents=len(log.incidents),
        pending_follow_ups=pending_follow_ups(log),
        participants=list(tallies.values()),
    )


def to_csv(log: SessionLog) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for o in log.observations:
        writer.writerow([
            "observation", o.timestamp.isoformat(), o.participant_name or "",
            o.category, o.title, o.content,
        ])
    for i in log.interventions:
        writer.writerow([
            "intervention", i.timestamp.isoformat(), i.participant_name,
            i.type, i.reason, i.action,
        ])
    for inc in log.incidents:
        writer.writerow([
            "incident", inc.timestamp.isoformat(), ";".join(inc.involved_participants),
            inc.severity, inc.title, inc.description,
        ])
    for a in log.adaptations:
        writer.writerow([
            "adaptation", a.timestamp.isoformat(), "", a.type, a.reason, a.description,
        ])
    return buf.getvalue()


class SessionLogService:
    """In-process store of session logs keyed by session id."""

    def __init__(
        self,
        notifications: NotificationStore | None = None,
        rng: random.Random | None = None,
    ):
        self._notifications = notifications
        self._rng = rng or random.Random()
        self._logs: dict[str, SessionLog] = {}

    @property
    def notifications(self) -> NotificationStore:
        return self._notifications or get_notification_center()

    def templates(self) -> list[LoggingTemplate]:
        return mock_data.get_logging_templates()

    def initialize(self, session_id: str, req: SessionLogCreate, teacher: CurrentUser) -> SessionLog:
        """Create the log for *session_id*; an existing log is returned unchanged."""
        if session_id in self._logs:
            return self._logs[session_id]

        log = SessionLog(
            id=f"log_{session_id}",
            session_id=session_id,
            session_title=req.session_title,
            teacher_id=teacher.user_id,
            teacher_name=teacher.name,
            is_live=req.is_live,
            participants=req.participants,
        )
        if should_use_mock():
            pairs = [(p.id, p.name) for p in req.participants]
            log.observations = mock_data.get_seed_observations(pairs)
            log.interventions = mock_data.get_seed_interventions(pairs)
        self._logs[session_id] = log
        logger.info("Session log %s initialized by %s", log.id, teacher.user_id)
        return log

    def get(self, session_id: str) -> SessionLog:
        log = self._logs.get(session_id)
        if log is None:
            raise NotFoundError("session_log", session_id)
        return log

    def _writable(self, session_id: str) -> SessionLog:
        log = self.get(session_id)
        if log.is_locked:
            raise LockedError(session_id)
        return log

    def _participant_name(self, log: SessionLog, participant_id: str | None) -> str | None:
        if participant_id is None:
            return None
        for p in log.participants:
            if p.id == participant_id:
                return p.name
        return None

    # -- writes --------------------------------------------------------------

    async def log_observation(
        self, session_id: str, req: ObservationCreate, user: CurrentUser
    ) -> ObservationNote:
        log = self._writable(session_id)
        if not req.content.strip():
            await self.notifications.add(
                user.user_id, "error", "Note Required", "Please enter an observation note.",
            )
            raise ValidationFailedError("Observation content is required", field="content")

        concern = req.category == "concern"
        note = ObservationNote(
            category=req.category,
            participant_id=req.participant_id,
            participant_name=self._participant_name(log, req.participant_id),
            title=observation_title(req.category),
            content=req.content.strip(),
            tags=[req.category],
            visibility=req.visibility,
            priority="high" if concern else "medium",
            follow_up_needed=concern,
            follow_up_date=_utcnow() + timedelta(days=7) if concern else None,
        )
        log.observations.insert(0, note)
        await self.notifications.add(
            user.user_id, "success", "Observation Logged",
            f"{req.category.capitalize()} observation saved successfully.",
        )
        return note

    async def report_incident(
        self, session_id: str, req: IncidentCreate, user: CurrentUser
    ) -> CriticalIncident:
        log = self._writable(session_id)
        if not req.title.strip() or not req.description.strip():
            await self.notifications.add(
                user.user_id, "error", "Missing Information",
                "Please provide both title and description for the incident.",
            )
            raise ValidationFailedError("Incident title and description are required")

        severe = req.severity == "severe"
        incident = CriticalIncident(
            type=req.type,
            severity=req.severity,
            title=req.title.strip(),
            description=req.description.strip(),
            involved_participants=req.involved_participants,
            reported_by=user.user_id,
            requires_external_report=severe or req.type == "safety_concern",
            confidentiality_level="confidential" if severe else "internal",
            legal_implications=req.type in ("harassment", "safety_concern"),
        )
        log.incidents.insert(0, incident)
        log.metadata.escalations += 1
        await self.notifications.add(
            user.user_id, "warning", "Incident Reported",
            "Critical incident has been documented and flagged for review.",
        )
        logger.warning(
            "Incident %s (%s/%s) reported on %s by %s",
            incident.id, req.type, req.severity, session_id, user.user_id,
        )
        return incident

    async def log_intervention(
        self, session_id: str, req: InterventionCreate, user: CurrentUser
    ) -> InterventionLog:
        log = self._writable(session_id)
        entry = InterventionLog(
            type=req.type,
            participant_id=req.participant_id,
            participant_name=self._participant_name(log, req.participant_id) or "",
            reason=req.reason,
            action=req.action,
            severity=req.severity,
            outcome=req.outcome,
            follow_up_required=req.follow_up_required,
        )
        log.interventions.insert(0, entry)
        for p in log.participants:
            if p.id == req.participant_id:
                p.interventions_received += 1
        await self.notifications.add(
            user.user_id, "info", "Intervention Logged", f"{req.type.capitalize()} intervention recorded.",
        )
        return entry

    async def log_adaptation(
        self, session_id: str, req: AdaptationCreate, user: CurrentUser
    ) -> AdaptationLog:
        log = self._writable(session_id)
        entry = AdaptationLog(**req.model_dump())
        log.adaptations.insert(0, entry)
        return entry

    def auto_log_activity(self, session_id: str) -> ObservationNote | None:
        """Add a neutral progress note while the session is live and unlocked."""
        log = self.get(session_id)
        if not log.is_live or log.is_locked:
            return None
        note = ObservationNote(
            category="neutral",
            title="Auto-logged Activity",
            content=f"Session progressing normally. {len(log.participants)} participants active.",
            tags=["auto_logged", "activity"],
            priority="low",
        )
        log.observations.insert(0, note)
        log.metadata.total_messages += self._rng.randint(0, 4)
        return note

    async def run_auto_log(self, interval_seconds: int | None = None) -> None:
        """Auto-log every live session forever; started from the app lifespan."""
        interval = interval_seconds or get_settings().auto_log_interval_seconds
        while True:
            await asyncio.sleep(interval)
            for session_id in list(self._logs):
                self.auto_log_activity(session_id)

    async def lock(self, session_id: str, reason: str, user: CurrentUser) -> SessionLog:
        log = self.get(session_id)
        log.is_locked = True
        log.lock_reason = reason
        log.locked_by = user.user_id
        log.locked_at = _utcnow()
        await self.notifications.add(
            user.user_id, "info", "Session Log Locked", "Session log has been locked for editing.",
        )
        logger.info("Session log %s locked by %s", log.id, user.user_id)
        return log

    # -- reads ---------------------------------------------------------------

    def filtered_observations(self, session_id: str, filters: ObservationFilters) -> list[ObservationNote]:
        return filter_observations(self.get(session_id).observations, filters)

    def summary(self, session_id: str) -> SessionLogSummary:
        return summarize(self.get(session_id))

    async def export(self, session_id: str, fmt: str, user: CurrentUser) -> tuple[str, str, str]:
        """Return ``(content, media_type, filename)``."""
        log = self.get(session_id)
        if fmt == "json":
            content = json.dumps(log.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)
            media_type = "application/json"
        elif fmt == "csv":
            content, media_type = to_csv(log), "text/csv"
        else:
            raise ValidationFailedError(f"Unsupported export format: {fmt}", field="format")

        await self.notifications.add(
            user.user_id, "success", "Export Started",
            f"Session log export in {fmt.upper()} format has been queued.",
        )
        return content, media_type, f"{log.id}.{fmt}"


_service: SessionLogService | None = None


def get_session_log_service() -> SessionLogService:
    global _service
    if _service is None:
        _service = SessionLogService()
    return _service
