"""Class detail endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_current_user
from models.classes import ClassDetailView
from models.user import CurrentUser
from services.class_detail import get_class_detail_service

router = APIRouter(prefix="/api/classes", tags=["classes"])


@router.get("/{class_id}", response_model=ClassDetailView)
async def class_detail(class_id: str, user: CurrentUser = Depends(get_current_user)):
    return await get_class_detail_service().load(class_id, user)


@router.post("/{class_id}/share")
async def share_class(class_id: str, user: CurrentUser = Depends(get_current_user)):
    await get_class_detail_service().share(class_id, user)
    return {"ok": True}


@router.post("/{class_id}/archive", response_model=ClassDetailView)
async def archive_class(class_id: str, user: CurrentUser = Depends(get_current_user)):
    return await get_class_detail_service().archive(class_id, user)
