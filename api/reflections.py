"""Reflection review queue endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from api.deps import get_current_user
from models.reflections import (
    BulkActionRequest,
    BulkActionResult,
    ReflectionContent,
    ReflectionQuery,
    ReflectionSummary,
    ReviewStats,
    TeacherFeedback,
)
from models.user import CurrentUser
from services.reflection_review import get_reflection_review_service

router = APIRouter(prefix="/api/reflections", tags=["reflections"])


@router.get("", response_model=list[ReflectionSummary])
async def list_reflections(
    search: str = "",
    status: str = "all",
    priority: str = "all",
    sort_by: str = Query(default="submitted_date", alias="sortBy"),
    user: CurrentUser = Depends(get_current_user),
):
    query = ReflectionQuery(search=search, status=status, priority=priority, sort_by=sort_by)
    return await get_reflection_review_service().query(user, query)


@router.get("/stats", response_model=ReviewStats)
async def stats(user: CurrentUser = Depends(get_current_user)):
    return await get_reflection_review_service().stats(user)


@router.get("/{reflection_id}", response_model=ReflectionContent)
async def reflection_content(reflection_id: str, user: CurrentUser = Depends(get_current_user)):
    return await get_reflection_review_service().get_content(reflection_id, user)


@router.post("/{reflection_id}/feedback", response_model=ReflectionSummary)
async def save_feedback(
    reflection_id: str, feedback: TeacherFeedback, user: CurrentUser = Depends(get_current_user)
):
    return await get_reflection_review_service().save_feedback(reflection_id, feedback, user)


@router.post("/bulk", response_model=BulkActionResult)
async def bulk_action(req: BulkActionRequest, user: CurrentUser = Depends(get_current_user)):
    return await get_reflection_review_service().bulk_action(req.ids, req.action, user)
