"""Session creation wizard — step validation, topic/participant helpers, creation.

The wizard walks a teacher through six steps (basic info → topic →
participants → configuration → preparation → review).  Everything here is
a pure function over a :class:`SessionDraft` except the two calls that hit
the backend: :func:`load_wizard_data` and :func:`create_session`.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from adapters.session_adapter import create_session as create_session_upstream
from adapters.session_adapter import list_available_topics, list_teacher_students
from errors import UpstreamError, ValidationFailedError
from models.sessions import (
    DebateFormat,
    DebateTopic,
    MatchingSuggestion,
    ParticipantFilters,
    ParticipantRange,
    SessionDraft,
    StudentProfile,
    TopicFilters,
    WizardStep,
)
from models.user import CurrentUser
from services import mock_data
from services.backend_client import BackendClient, get_backend_client
from services.fallback import fall_back, should_use_mock
from services.notifications import NotificationStore, get_notification_center

logger = logging.getLogger(__name__)

DEBATE_FORMATS: list[DebateFormat] = [
    DebateFormat(
        id="oxford",
        name="Oxford Style",
        description="Traditional formal debate with opening statements, rebuttals, and closing arguments",
        duration=45,
        participants=ParticipantRange(min=6, max=8),
        difficulty="intermediate",
    ),
    DebateFormat(
        id="lincoln-douglas",
        name="Lincoln-Douglas",
        description="One-on-one debate format focusing on values and philosophy",
        duration=30,
        participants=ParticipantRange(min=2, max=2),
        difficulty="advanced",
    ),
    DebateFormat(
        id="parliamentary",
        name="Parliamentary",
        description="Government vs Opposition style with multiple speakers",
        duration=40,
        participants=ParticipantRange(min=4, max=6),
        difficulty="advanced",
    ),
    DebateFormat(
        id="fishbowl",
        name="Fishbowl Discussion",
        description="Inner circle debates while outer circle observes and rotates in",
        duration=35,
        participants=ParticipantRange(min=8, max=16),
        difficulty="beginner",
    ),
    DebateFormat(
        id="socratic",
        name="Socratic Seminar",
        description="Question-driven discussion exploring ideas through inquiry",
        duration=50,
        participants=ParticipantRange(min=6, max=12),
        difficulty="intermediate",
    ),
]

_FORMATS_BY_ID = {f.id: f for f in DEBATE_FORMATS}
_DEFAULT_RANGE = ParticipantRange(min=2, max=8)

WIZARD_STEPS: list[tuple[str, str, str]] = [
    ("basic-info", "Basic Information", "Session title, description, and basic settings"),
    ("topic-selection", "Topic Selection", "Choose debate topic with difficulty and appropriateness filtering"),
    ("participant-selection", "Participants", "Select students with automatic matching suggestions"),
    ("configuration", "Configuration", "Debate format, timing, and moderation settings"),
    ("preparation", "Preparation", "Materials, instructions, and notifications setup"),
    ("review", "Review & Schedule", "Final review and session scheduling"),
]

BALANCED_SKILL_TARGET = 75


def get_format(format_id: str) -> DebateFormat | None:
    return _FORMATS_BY_ID.get(format_id)


def participant_range(format_id: str) -> ParticipantRange:
    fmt = _FORMATS_BY_ID.get(format_id)
    return fmt.participants if fmt else _DEFAULT_RANGE


# ---------------------------------------------------------------------------
# Step validation
# ---------------------------------------------------------------------------

def validate_step(draft: SessionDraft, index: int) -> bool:
    """True when step *index* of the wizard has everything it needs."""
    if index == 0:
        return bool(draft.title.strip() and draft.description.strip())
    if index == 1:
        return draft.topic is not None
    if index == 2:
        limits = participant_range(draft.configuration.format)
        return limits.min <= len(draft.participants) <= limits.max
    if index == 3:
        return draft.configuration.duration > 0
    if index == 4:
        return True
    if index == 5:
        return draft.scheduled_date is not None and bool(draft.scheduled_time)
    return False


def step_states(draft: SessionDraft) -> list[WizardStep]:
    return [
        WizardStep(id=sid, title=title, description=desc, is_complete=validate_step(draft, i))
        for i, (sid, title, desc) in enumerate(WIZARD_STEPS)
    ]


def progress(index: int) -> float:
    return (index + 1) / len(WIZARD_STEPS) * 100


# ---------------------------------------------------------------------------
# Draft mutations
# ---------------------------------------------------------------------------

def select_topic(draft: SessionDraft, topic: DebateTopic) -> SessionDraft:
    """Choosing a topic resets the duration and the participant list."""
    updated = draft.model_copy(deep=True)
    updated.topic = topic
    updated.configuration.duration = topic.estimated_duration
    updated.participants = []
    return updated


async def toggle_participant(
    draft: SessionDraft,
    student: StudentProfile,
    user: CurrentUser,
    notifications: NotificationStore | None = None,
) -> SessionDraft:
    """Remove *student* if selected, otherwise add them up to the format max."""
    updated = draft.model_copy(deep=True)
    if any(p.id == student.id for p in updated.participants):
        updated.participants = [p for p in updated.participants if p.id != student.id]
        return updated

    limits = participant_range(updated.configuration.format)
    if len(updated.participants) >= limits.max:
        center = notifications or get_notification_center()
        await center.add(
            user.user_id,
            "warning",
            "Maximum Participants Reached",
            f"This debate format supports maximum {limits.max} participants.",
        )
        return updated

    updated.participants.append(student)
    return updated


# ---------------------------------------------------------------------------
# Matching suggestions
# ---------------------------------------------------------------------------

def _interest_matches(student: StudentProfile, topic: DebateTopic) -> bool:
    category = topic.category.lower()
    return any(
        interest in topic.tags or interest.lower() in category
        for interest in student.preferences.topic_interests
    )


def matching_suggestions(
    draft: SessionDraft, students: list[StudentProfile]
) -> list[MatchingSuggestion]:
    """Up to two participant groupings: shared interest, then balanced skill."""
    if draft.topic is None:
        return []
    needed = participant_range(draft.configuration.format).min
    if len(students) < needed:
        return []

    suggestions: list[MatchingSuggestion] = []
    interested = [s for s in students if _interest_matches(s, draft.topic)]
    if len(interested) >= needed:
        suggestions.append(MatchingSuggestion(
            students=interested[:needed],
            score=95,
            reasoning="Students with strong topic interest and balanced skill levels",
        ))

    balanced = sorted(students, key=lambda s: abs(s.average_skill - BALANCED_SKILL_TARGET))
    suggestions.append(MatchingSuggestion(
        students=balanced[:needed],
        score=85,
        reasoning="Balanced skill levels for fair and challenging debate",
    ))
    return suggestions


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

def filter_topics(topics: list[DebateTopic], filters: TopicFilters) -> list[DebateTopic]:
    search = filters.search.lower()
    result = []
    for topic in topics:
        if search and search not in topic.title.lower() and search not in topic.description.lower():
            continue
        if filters.difficulty and topic.difficulty != filters.difficulty:
            continue
        if filters.category and topic.category != filters.category:
            continue
        if filters.grade:
            try:
                grade = int(filters.grade)
            except ValueError:
                grade = None
            if grade is not None and not (
                topic.appropriateness.min_grade <= grade <= topic.appropriateness.max_grade
            ):
                continue
        result.append(topic)
    return result


def filter_students(
    students: list[StudentProfile], filters: ParticipantFilters
) -> list[StudentProfile]:
    search = filters.search.lower()
    return [
        s for s in students
        if (not search or search in s.first_name.lower() or search in s.last_name.lower())
        and (not filters.class_id or s.class_id == filters.class_id)
    ]


# ---------------------------------------------------------------------------
# Backend calls
# ---------------------------------------------------------------------------

async def load_wizard_data(
    user: CurrentUser,
    class_id: str | None = None,
    client: BackendClient | None = None,
) -> tuple[list[DebateTopic], list[StudentProfile], str]:
    """Fetch topics and students together; any failure serves mock data for both.

    Returns ``(topics, students, source)`` where source is backend or mock.
    """
    if should_use_mock():
        return mock_data.get_topics(), mock_data.get_students(), "mock"

    client = client or get_backend_client()
    try:
        topics, students = await asyncio.gather(
            list_available_topics(client, token=user.token or None),
            list_teacher_students(client, class_id, token=user.token or None),
        )
    except Exception as exc:
        if not fall_back("session_wizard.load", exc):
            raise UpstreamError(f"Failed to load wizard data: {exc}") from exc
        return mock_data.get_topics(), mock_data.get_students(), "mock"
    return topics, students, "backend"


async def create_session(
    draft: SessionDraft,
    user: CurrentUser,
    client: BackendClient | None = None,
    notifications: NotificationStore | None = None,
) -> str:
    """Validate every step, then POST the session.  Returns the new id."""
    incomplete = [WIZARD_STEPS[i][1] for i in range(len(WIZARD_STEPS)) if not validate_step(draft, i)]
    if incomplete:
        raise ValidationFailedError(f"Incomplete steps: {', '.join(incomplete)}")

    center = notifications or get_notification_center()
    try:
        if should_use_mock():
            session_id = f"session-{uuid.uuid4().hex[:8]}"
        else:
            session_id = await create_session_upstream(
                client or get_backend_client(), draft, user.user_id, token=user.token or None,
            )
    except Exception as exc:
        logger.exception("Session creation failed for %s", user.user_id)
        await center.add(
            user.user_id,
            "error",
            "Session Creation Failed",
            "There was an error creating the debate session. Please try again.",
        )
        raise UpstreamError("Failed to create session") from exc

    await center.add(
        user.user_id,
        "success",
        "Session Created Successfully",
        f'Debate session "{draft.title}" has been scheduled.',
    )
    logger.info("Session %s created by %s", session_id, user.user_id)
    return session_id
