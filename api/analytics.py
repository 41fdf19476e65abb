"""Teacher analytics dashboard and engagement heat map endpoints."""

from __future__ import annotations

import random

from fastapi import APIRouter, Depends, Query

from api.deps import get_current_user
from models.analytics import HeatMap, HeatMapMetric, TeacherDashboardData, Timeframe
from models.user import CurrentUser
from services import analytics, mock_data

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/dashboard", response_model=TeacherDashboardData)
async def dashboard(
    class_id: str | None = Query(default=None, alias="classId"),
    user: CurrentUser = Depends(get_current_user),
):
    return await analytics.dashboard(user, class_id)


@router.get("/engagement", response_model=HeatMap)
async def engagement(
    timeframe: Timeframe = "month",
    metric: HeatMapMetric = "overall_engagement",
    user: CurrentUser = Depends(get_current_user),
):
    rng = random.Random()
    students = mock_data.generate_students(rng)
    data = analytics.engagement_data(students, timeframe, rng)
    return analytics.heat_map(students, data, metric, timeframe)
