"""Session documentation endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from api.deps import get_current_user
from models.session_log import (
    AdaptationCreate,
    AdaptationLog,
    CriticalIncident,
    IncidentCreate,
    InterventionCreate,
    InterventionLog,
    LockRequest,
    LoggingTemplate,
    LogExportFormat,
    ObservationCreate,
    ObservationFilters,
    ObservationNote,
    SessionLog,
    SessionLogCreate,
    SessionLogSummary,
)
from models.user import CurrentUser
from services.session_log import get_session_log_service

router = APIRouter(prefix="/api/session-logs", tags=["session-logs"])


@router.get("/templates", response_model=list[LoggingTemplate])
async def templates(user: CurrentUser = Depends(get_current_user)):
    return get_session_log_service().templates()


@router.post("/{session_id}", response_model=SessionLog, status_code=201)
async def initialize(
    session_id: str, req: SessionLogCreate, user: CurrentUser = Depends(get_current_user)
):
    return get_session_log_service().initialize(session_id, req, user)


@router.get("/{session_id}", response_model=SessionLog)
async def get_log(session_id: str, user: CurrentUser = Depends(get_current_user)):
    return get_session_log_service().get(session_id)


@router.get("/{session_id}/observations", response_model=list[ObservationNote])
async def observations(
    session_id: str,
    category: str = "",
    participant: str = "",
    search: str = "",
    user: CurrentUser = Depends(get_current_user),
):
    filters = ObservationFilters(category=category, participant=participant, search=search)
    return get_session_log_service().filtered_observations(session_id, filters)


@router.post("/{session_id}/observations", response_model=ObservationNote, status_code=201)
async def log_observation(
    session_id: str, req: ObservationCreate, user: CurrentUser = Depends(get_current_user)
):
    return await get_session_log_service().log_observation(session_id, req, user)


@router.post("/{session_id}/incidents", response_model=CriticalIncident, status_code=201)
async def report_incident(
    session_id: str, req: IncidentCreate, user: CurrentUser = Depends(get_current_user)
):
    return await get_session_log_service().report_incident(session_id, req, user)


@router.post("/{session_id}/interventions", response_model=InterventionLog, status_code=201)
async def log_intervention(
    session_id: str, req: InterventionCreate, user: CurrentUser = Depends(get_current_user)
):
    return await get_session_log_service().log_intervention(session_id, req, user)


@router.post("/{session_id}/adaptations", response_model=AdaptationLog, status_code=201)
async def log_adaptation(
    session_id: str, req: AdaptationCreate, user: CurrentUser = Depends(get_current_user)
):
    return await get_session_log_service().log_adaptation(session_id, req, user)


@router.post("/{session_id}/lock", response_model=SessionLog)
async def lock(session_id: str, req: LockRequest, user: CurrentUser = Depends(get_current_user)):
    return await get_session_log_service().lock(session_id, req.reason, user)


@router.get("/{session_id}/summary", response_model=SessionLogSummary)
async def summary(session_id: str, user: CurrentUser = Depends(get_current_user)):
    return get_session_log_service().summary(session_id)


@router.get("/{session_id}/export")
async def export(
    session_id: str, format: LogExportFormat = "json", user: CurrentUser = Depends(get_current_user)
):
    content, media_type, filename = await get_session_log_service().export(session_id, format, user)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
