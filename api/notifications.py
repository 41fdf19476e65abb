"""Notification center endpoints — the UI polls these for toasts."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_current_user
from models.notifications import Notification, NotificationCreate
from models.user import CurrentUser
from services.notifications import get_notification_center

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=list[Notification])
async def list_notifications(
    unread_only: bool = False, user: CurrentUser = Depends(get_current_user)
):
    return await get_notification_center().list(user.user_id, unread_only=unread_only)


@router.get("/unread-count")
async def unread_count(user: CurrentUser = Depends(get_current_user)):
    return {"count": await get_notification_center().unread_count(user.user_id)}


@router.post("", response_model=Notification, status_code=201)
async def add_notification(req: NotificationCreate, user: CurrentUser = Depends(get_current_user)):
    return await get_notification_center().add(user.user_id, req.type, req.title, req.message)


@router.post("/{notification_id}/read")
async def mark_read(notification_id: str, user: CurrentUser = Depends(get_current_user)):
    if not await get_notification_center().mark_read(user.user_id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"ok": True}


@router.post("/read-all")
async def mark_all_read(user: CurrentUser = Depends(get_current_user)):
    return {"updated": await get_notification_center().mark_all_read(user.user_id)}


@router.delete("")
async def clear(user: CurrentUser = Depends(get_current_user)):
    await get_notification_center().clear(user.user_id)
    return {"ok": True}
