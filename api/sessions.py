"""Debate session endpoints: the creation wizard and the session list.

The wizard itself is client-driven; these endpoints serve its reference
data and evaluate a draft (step states, participant toggle, matching).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query
from pydantic import Field

from api.deps import get_current_user
from models.base import CamelModel
from models.sessions import (
    DebateFormat,
    DebateSession,
    DebateTopic,
    MatchingSuggestion,
    ParticipantFilters,
    SessionAction,
    SessionDraft,
    SessionFilters,
    SessionTab,
    StudentProfile,
    TopicFilters,
    WizardStep,
)
from models.user import CurrentUser
from services import session_list, session_wizard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


class WizardData(CamelModel):
    formats: list[DebateFormat]
    topics: list[DebateTopic]
    students: list[StudentProfile]
    source: str


class DraftState(CamelModel):
    steps: list[WizardStep]
    suggestions: list[MatchingSuggestion] = Field(default_factory=list)


class TopicSelection(CamelModel):
    draft: SessionDraft
    topic: DebateTopic


class ParticipantToggle(CamelModel):
    draft: SessionDraft
    student: StudentProfile


class SessionActionRequest(CamelModel):
    action: SessionAction
    title: str = ""


class SessionListResponse(CamelModel):
    sessions: list[DebateSession]
    counts: dict[str, int]
    source: str


# ── Wizard ───────────────────────────────────────────────────


@router.get("/wizard/data", response_model=WizardData)
async def wizard_data(
    class_id: str | None = Query(default=None, alias="classId"),
    user: CurrentUser = Depends(get_current_user),
):
    topics, students, source = await session_wizard.load_wizard_data(user, class_id)
    return WizardData(
        formats=session_wizard.DEBATE_FORMATS, topics=topics, students=students, source=source,
    )


@router.post("/wizard/topics/filter", response_model=list[DebateTopic])
async def filter_topics(filters: TopicFilters, user: CurrentUser = Depends(get_current_user)):
    topics, _, _ = await session_wizard.load_wizard_data(user)
    return session_wizard.filter_topics(topics, filters)


@router.post("/wizard/students/filter", response_model=list[StudentProfile])
async def filter_students(filters: ParticipantFilters, user: CurrentUser = Depends(get_current_user)):
    _, students, _ = await session_wizard.load_wizard_data(user)
    return session_wizard.filter_students(students, filters)


@router.post("/wizard/validate", response_model=DraftState)
async def validate_draft(draft: SessionDraft, user: CurrentUser = Depends(get_current_user)):
    _, students, _ = await session_wizard.load_wizard_data(user)
    return DraftState(
        steps=session_wizard.step_states(draft),
        suggestions=session_wizard.matching_suggestions(draft, students),
    )


@router.post("/wizard/select-topic", response_model=SessionDraft)
async def select_topic(req: TopicSelection, user: CurrentUser = Depends(get_current_user)):
    return session_wizard.select_topic(req.draft, req.topic)


@router.post("/wizard/toggle-participant", response_model=SessionDraft)
async def toggle_participant(req: ParticipantToggle, user: CurrentUser = Depends(get_current_user)):
    return await session_wizard.toggle_participant(req.draft, req.student, user)


@router.post("", status_code=201)
async def create_session(draft: SessionDraft, user: CurrentUser = Depends(get_current_user)):
    session_id = await session_wizard.create_session(draft, user)
    return {"sessionId": session_id}


# ── Session list ─────────────────────────────────────────────


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    tab: SessionTab = "all",
    search: str = "",
    status: str = "",
    format: str = "",
    user: CurrentUser = Depends(get_current_user),
):
    sessions, source = await session_list.load_sessions(user)
    filters = SessionFilters(search=search, status=status, format=format)
    return SessionListResponse(
        sessions=session_list.apply_filters(sessions, tab, filters),
        counts=session_list.status_counts(sessions),
        source=source,
    )


@router.post("/{session_id}/actions")
async def session_action(
    session_id: str, req: SessionActionRequest, user: CurrentUser = Depends(get_current_user)
):
    return await session_list.perform_action(session_id, req.action, user, title=req.title)
