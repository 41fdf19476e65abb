"""Audit log endpoints: query, export, alert rules and the live SSE stream.

- ``POST /api/audit/query``   — filtered entries
- ``POST /api/audit/export``  — CSV or JSON download
- ``GET  /api/audit/stream``  — Server-Sent Events, one ``audit`` event per new entry
"""

from __future__ import annotations

import json
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, Query, Response
from sse_starlette.sse import EventSourceResponse

from api.deps import get_current_user
from config.settings import get_settings
from errors import PermissionDeniedError
from models.audit import (
    AuditAlert,
    AuditAlertCreate,
    AuditExportRequest,
    AuditFilter,
    AuditLogEntry,
    AuditQueryResponse,
    DatePreset,
    DateRange,
    StreamConfig,
)
from models.user import CurrentUser, Permission
from services.audit_log import get_audit_log_service, resolve_date_range

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/audit", tags=["audit"])


def require_viewer(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.has(Permission.VIEW_AUDIT_LOGS):
        raise PermissionDeniedError(Permission.VIEW_AUDIT_LOGS.value)
    return user


@router.post("/query", response_model=AuditQueryResponse)
async def query_logs(f: AuditFilter, user: CurrentUser = Depends(require_viewer)):
    if f.date_range.preset != "custom":
        f.date_range = resolve_date_range(f.date_range.preset)
    entries = get_audit_log_service().query(f)
    return AuditQueryResponse(total=len(entries), entries=entries)


@router.get("/date-range/{preset}", response_model=DateRange)
async def date_range(preset: DatePreset, user: CurrentUser = Depends(require_viewer)):
    return resolve_date_range(preset)


@router.post("/export")
async def export_logs(req: AuditExportRequest, user: CurrentUser = Depends(require_viewer)):
    f = req.filter
    if f.date_range.preset != "custom":
        f.date_range = resolve_date_range(f.date_range.preset)
    content, media_type, filename = await get_audit_log_service().export(req.config, f, user)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ── Alerts ───────────────────────────────────────────────────


@router.get("/alerts", response_model=list[AuditAlert])
async def list_alerts(user: CurrentUser = Depends(require_viewer)):
    return get_audit_log_service().alerts


@router.post("/alerts", response_model=AuditAlert, status_code=201)
async def create_alert(req: AuditAlertCreate, user: CurrentUser = Depends(require_viewer)):
    return get_audit_log_service().add_alert(req, user)


@router.post("/alerts/{alert_id}/enabled", response_model=AuditAlert)
async def set_alert_enabled(
    alert_id: str, enabled: bool = True, user: CurrentUser = Depends(require_viewer)
):
    return get_audit_log_service().set_alert_enabled(alert_id, enabled)


@router.delete("/alerts/{alert_id}")
async def delete_alert(alert_id: str, user: CurrentUser = Depends(require_viewer)):
    get_audit_log_service().remove_alert(alert_id)
    return {"ok": True}


# ── Live stream ──────────────────────────────────────────────


async def _event_generator(user: CurrentUser, config: StreamConfig) -> AsyncGenerator[dict, None]:
    async for entry in get_audit_log_service().stream(user, config):
        yield {
            "event": "audit",
            "id": entry.id,
            "data": json.dumps(entry.model_dump(mode="json", by_alias=True), ensure_ascii=False),
        }


@router.get("/stream")
async def stream(
    refresh_interval: int | None = Query(default=None, alias="refreshInterval", ge=100),
    max_entries: int | None = Query(default=None, alias="maxEntries", ge=1),
    show_notifications: bool = Query(default=True, alias="showNotifications"),
    user: CurrentUser = Depends(require_viewer),
):
    settings = get_settings()
    config = StreamConfig(
        refresh_interval=refresh_interval or settings.audit_refresh_interval_ms,
        max_entries=max_entries or settings.audit_max_entries,
        show_notifications=show_notifications,
    )
    logger.info("Audit stream opened by %s (every %dms)", user.user_id, config.refresh_interval)
    return EventSourceResponse(_event_generator(user, config), media_type="text/event-stream")


@router.get("/{entry_id}", response_model=AuditLogEntry)
async def get_entry(entry_id: str, user: CurrentUser = Depends(require_viewer)):
    return get_audit_log_service().get(entry_id)
