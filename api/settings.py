"""System settings and feature flag endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_current_user
from models.system_settings import (
    FeatureFlag,
    FeatureFlagToggle,
    PlatformHealth,
    RolloutUpdate,
    SaveSettingsRequest,
    SaveSettingsResult,
    StageChangeRequest,
    SystemSetting,
)
from models.user import CurrentUser
from services.system_settings import get_system_settings_service

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=list[SystemSetting])
async def list_settings(
    category: str = "all", search: str = "", user: CurrentUser = Depends(get_current_user)
):
    return get_system_settings_service().list_settings(category, search)


@router.get("/unsaved")
async def unsaved_changes(user: CurrentUser = Depends(get_current_user)):
    return get_system_settings_service().unsaved_changes


@router.post("/save", response_model=SaveSettingsResult)
async def save(req: SaveSettingsRequest, user: CurrentUser = Depends(get_current_user)):
    return await get_system_settings_service().save(user, confirm_restart=req.confirm_restart)


@router.post("/discard")
async def discard(user: CurrentUser = Depends(get_current_user)):
    return {"discarded": get_system_settings_service().discard()}


@router.post("/reset", response_model=list[SystemSetting])
async def reset(user: CurrentUser = Depends(get_current_user)):
    return await get_system_settings_service().reset_to_defaults(user)


@router.get("/health", response_model=PlatformHealth)
async def platform_health(user: CurrentUser = Depends(get_current_user)):
    return get_system_settings_service().health()


@router.get("/feature-flags", response_model=list[FeatureFlag])
async def list_flags(user: CurrentUser = Depends(get_current_user)):
    return get_system_settings_service().list_flags()


@router.post("/feature-flags/{flag_id}/toggle", response_model=FeatureFlag)
async def toggle_flag(
    flag_id: str, req: FeatureFlagToggle, user: CurrentUser = Depends(get_current_user)
):
    return await get_system_settings_service().toggle_feature_flag(flag_id, req.enabled, user)


@router.post("/feature-flags/{flag_id}/rollout", response_model=FeatureFlag)
async def set_rollout(
    flag_id: str, req: RolloutUpdate, user: CurrentUser = Depends(get_current_user)
):
    return await get_system_settings_service().set_rollout(flag_id, req.percentage, user)


@router.put("/{setting_id}", response_model=SystemSetting)
async def stage_change(
    setting_id: str, req: StageChangeRequest, user: CurrentUser = Depends(get_current_user)
):
    return await get_system_settings_service().stage_change(setting_id, req.value, user)
