"""Backup, integrity check, maintenance window and system health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_current_user
from errors import PermissionDeniedError
from models.maintenance import BackupJob, IntegrityCheck, MaintenanceWindow, SystemHealth
from models.user import CurrentUser, Permission
from services.backup import get_backup_service

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


@router.get("/health", response_model=SystemHealth)
async def system_health(user: CurrentUser = Depends(get_current_user)):
    if not user.has(Permission.VIEW_SYSTEM_HEALTH):
        raise PermissionDeniedError(Permission.VIEW_SYSTEM_HEALTH.value)
    return get_backup_service().health


@router.get("/backups", response_model=list[BackupJob])
async def list_backups(
    search: str = "", status: str = "all", user: CurrentUser = Depends(get_current_user)
):
    return get_backup_service().list_jobs(search, status)


@router.get("/backups/{job_id}", response_model=BackupJob)
async def get_backup(job_id: str, user: CurrentUser = Depends(get_current_user)):
    return get_backup_service().get_job(job_id)


@router.post("/backups/{job_id}/run", response_model=BackupJob, status_code=202)
async def run_backup(job_id: str, user: CurrentUser = Depends(get_current_user)):
    return await get_backup_service().run_backup(job_id, user)


@router.post("/backups/{job_id}/cancel", response_model=BackupJob)
async def cancel_backup(job_id: str, user: CurrentUser = Depends(get_current_user)):
    return await get_backup_service().cancel_backup(job_id, user)


@router.get("/integrity-checks", response_model=list[IntegrityCheck])
async def list_integrity_checks(user: CurrentUser = Depends(get_current_user)):
    return get_backup_service().list_integrity_checks()


@router.post("/integrity-checks/{check_id}/run", response_model=IntegrityCheck, status_code=202)
async def run_integrity_check(check_id: str, user: CurrentUser = Depends(get_current_user)):
    return await get_backup_service().run_integrity_check(check_id, user)


@router.get("/windows", response_model=list[MaintenanceWindow])
async def list_windows(status: str = "all", user: CurrentUser = Depends(get_current_user)):
    return get_backup_service().list_maintenance_windows(status)


@router.post("/mode/enable", response_model=SystemHealth)
async def enable_maintenance_mode(user: CurrentUser = Depends(get_current_user)):
    return await get_backup_service().enable_maintenance_mode(user)


@router.post("/mode/disable", response_model=SystemHealth)
async def disable_maintenance_mode(user: CurrentUser = Depends(get_current_user)):
    return await get_backup_service().disable_maintenance_mode(user)
