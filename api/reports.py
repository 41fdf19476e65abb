"""Report generator endpoints."""

from __future__ import annotations

import random

from fastapi import APIRouter, Depends, Response

from api.deps import get_current_user
from models.reports import GeneratedReport, ReportRequest, ScheduledReport, ScheduledReportCreate
from models.user import CurrentUser
from services import mock_data, reports
from services.reports import get_report_service

router = APIRouter(prefix="/api/reports", tags=["reports"])


def _students(req: ReportRequest):
    if req.students is not None:
        return req.students
    return mock_data.generate_students(random.Random())


@router.post("/generate", response_model=GeneratedReport)
async def generate(req: ReportRequest, user: CurrentUser = Depends(get_current_user)):
    return await get_report_service().generate(req.config, req.class_data, _students(req), user)


@router.post("/export")
async def export(req: ReportRequest, user: CurrentUser = Depends(get_current_user)):
    report = reports.generate(req.config, req.class_data, _students(req))
    return Response(
        content=reports.export_csv(report),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="report.csv"'},
    )


@router.get("/scheduled", response_model=list[ScheduledReport])
async def list_scheduled(user: CurrentUser = Depends(get_current_user)):
    return get_report_service().list_scheduled()


@router.post("/scheduled", response_model=ScheduledReport, status_code=201)
async def add_scheduled(req: ScheduledReportCreate, user: CurrentUser = Depends(get_current_user)):
    return get_report_service().add_scheduled(req)


@router.delete("/scheduled/{report_id}")
async def remove_scheduled(report_id: str, user: CurrentUser = Depends(get_current_user)):
    get_report_service().remove_scheduled(report_id)
    return {"ok": True}
