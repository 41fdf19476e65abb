"""Backup & maintenance — simulated jobs, integrity checks, maintenance mode, health.

No real backups run.  A started job is advanced by an asyncio task that
moves it 10% per tick through the backing_up → uploading → verifying stages,
and integrity checks complete after a fixed delay.
"""

from __future__ import annotations

import asyncio
import logging
import math
import random
from datetime import datetime, timedelta, timezone

from config.settings import get_settings
from errors import ConflictError, NotFoundError, PermissionDeniedError
from models.maintenance import (
    BackupHistory,
    BackupJob,
    BackupProgress,
    IntegrityCheck,
    MaintenanceWindow,
    SystemHealth,
)
from models.user import CurrentUser, Permission
from services import mock_data
from services.audit_log import AuditLogService, get_audit_log_service
from services.notifications import NotificationStore, get_notification_center

logger = logging.getLogger(__name__)

SIMULATED_FILES = 1000
SIMULATED_BYTES = 1000 * mock_data.MIB
PROGRESS_STEP = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def stage_for(percentage: int) -> str:
    if percentage > 80:
        return "verifying"
    if percentage > 60:
        return "uploading"
    return "backing_up"


def filter_jobs(jobs: list[BackupJob], search: str = "", status: str = "all") -> list[BackupJob]:
    needle = search.lower()
    return [
        j for j in jobs
        if (not needle or needle in j.name.lower() or needle in j.description.lower())
        and (status == "all" or j.status == status)
    ]


class BackupService:
    """Process-wide backup, integrity and maintenance state."""

    def __init__(
        self,
        notifications: NotificationStore | None = None,
        audit: AuditLogService | None = None,
        rng: random.Random | None = None,
        tick_seconds: float | None = None,
        check_seconds: float | None = None,
    ):
        settings = get_settings()
        self._notifications = notifications
        self._audit = audit
        self._rng = rng or random.Random()
        self._tick_seconds = settings.backup_tick_seconds if tick_seconds is None else tick_seconds
        self._check_seconds = settings.integrity_check_seconds if check_seconds is None else check_seconds

        self._jobs = mock_data.get_backup_jobs()
        self._windows = mock_data.get_maintenance_windows()
        self._checks = mock_data.get_integrity_checks()
        self._health = mock_data.get_system_health(self._windows)
        self._tasks: dict[str, asyncio.Task] = {}

    @property
    def notifications(self) -> NotificationStore:
        return self._notifications or get_notification_center()

    @property
    def audit(self) -> AuditLogService:
        return self._audit or get_audit_log_service()

    @property
    def health(self) -> SystemHealth:
        return self._health

    # ── Lookups ──────────────────────────────────────────────

    def list_jobs(self, search: str = "", status: str = "all") -> list[BackupJob]:
        return filter_jobs(self._jobs, search, status)

    def get_job(self, job_id: str) -> BackupJob:
        for job in self._jobs:
            if job.id == job_id:
                return job
        raise NotFoundError("backup_job", job_id)

    def list_maintenance_windows(self, status: str = "all") -> list[MaintenanceWindow]:
        return [w for w in self._windows if status == "all" or w.status == status]

    def list_integrity_checks(self) -> list[IntegrityCheck]:
        return list(self._checks)

    def get_check(self, check_id: str) -> IntegrityCheck:
        for check in self._checks:
            if check.id == check_id:
                return check
        raise NotFoundError("integrity_check", check_id)

    # ── Backups ──────────────────────────────────────────────

    async def _require(self, user: CurrentUser, permission: Permission, message: str) -> None:
        if user.has(permission):
            return
        await self.notifications.add(user.user_id, "error", "Access Denied", message)
        raise PermissionDeniedError(permission.value, message)

    async def run_backup(self, job_id: str, user: CurrentUser) -> BackupJob:
        await self._require(
            user, Permission.MANAGE_BACKUPS, "You do not have permission to run backups.",
        )
        job = self.get_job(job_id)
        if job.status == "running":
            raise ConflictError(f"Backup job '{job_id}' is already running")

        now = _utcnow()
        job.status = "running"
        job.updated_at = now
        job.progress = BackupProgress(
            stage="preparing",
            files_total=SIMULATED_FILES,
            bytes_total=SIMULATED_BYTES,
            started_at=now,
            eta_minutes=10,
        )
        self._tasks[job_id] = asyncio.create_task(self._drive(job_id))

        await self.notifications.add(
            user.user_id, "info", "Backup Started", f'Backup job "{job.name}" has been started.',
        )
        await self.audit.record(
            user, "backup", "system", f"Started backup job {job.name}",
            resource_id=job_id, severity="medium",
        )
        logger.info("Backup %s started by %s", job_id, user.user_id)
        return job

    def advance(self, job_id: str) -> bool:
        """Move a running job one step forward.  Returns True once it completes."""
        job = self.get_job(job_id)
        if job.status != "running" or job.progress is None:
            return True

        p = job.progress
        pct = min(100, p.percentage + PROGRESS_STEP)
        p.percentage = pct
        p.stage = stage_for(pct)
        p.files_processed = math.floor(pct / 100 * p.files_total)
        p.bytes_processed = math.floor(pct / 100 * p.bytes_total)
        p.speed_mbps = round(10 + self._rng.random() * 5, 1)
        p.eta_minutes = math.ceil((100 - pct) / 10)
        job.updated_at = _utcnow()

        if pct < 100:
            return False

        now = _utcnow()
        job.history.append(BackupHistory(
            id=f"hist_{job_id}_{len(job.history) + 1}",
            backup_job_id=job_id,
            started_at=p.started_at,
            completed_at=now,
            duration_minutes=round((now - p.started_at).total_seconds() / 60, 2),
            status="completed",
            size_bytes=p.bytes_total,
            files_count=p.files_total,
            destination_path=job.destination.location,
            verification_status="passed",
        ))
        job.status = "completed"
        job.progress = None
        job.last_run = now
        self._health.backup_status.last_successful_backup = now
        logger.info("Backup %s completed", job_id)
        return True

    def _forget(self, key: str) -> None:
        if self._tasks.get(key) is asyncio.current_task():
            del self._tasks[key]

    async def _drive(self, job_id: str) -> None:
        try:
            while True:
                await asyncio.sleep(self._tick_seconds)
                if self.advance(job_id):
                    break
        finally:
            self._forget(job_id)

    async def cancel_backup(self, job_id: str, user: CurrentUser) -> BackupJob:
        await self._require(
            user, Permission.MANAGE_BACKUPS, "You do not have permission to cancel backups.",
        )
        job = self.get_job(job_id)
        if job.status != "running":
            raise ConflictError(f"Backup job '{job_id}' is not running")

        task = self._tasks.pop(job_id, None)
        if task is not None:
            task.cancel()
        job.status = "cancelled"
        job.progress = None
        job.updated_at = _utcnow()
        await self.notifications.add(
            user.user_id, "warning", "Backup Cancelled", f'Backup job "{job.name}" was cancelled.',
        )
        return job

    # ── Integrity checks ─────────────────────────────────────

    async def run_integrity_check(self, check_id: str, user: CurrentUser) -> IntegrityCheck:
        await self._require(
            user, Permission.RUN_INTEGRITY_CHECKS,
            "You do not have permission to run integrity checks.",
        )
        check = self.get_check(check_id)
        if check.status == "running":
            raise ConflictError(f"Integrity check '{check_id}' is already running")

        check.status = "running"
        check.updated_at = _utcnow()
        await self.notifications.add(
            user.user_id, "info", "Integrity Check Started",
            f'Integrity check "{check.name}" is running.',
        )
        self._tasks[check_id] = asyncio.create_task(self._finish_check(check_id, user))
        return check

    async def complete_check(self, check_id: str, user: CurrentUser) -> IntegrityCheck:
        check = self.get_check(check_id)
        now = _utcnow()
        check.status = "completed"
        check.last_run = now
        check.next_run = now + timedelta(hours=24)
        check.updated_at = now
        self._health.integrity_status.last_integrity_check = now
        await self.notifications.add(
            user.user_id, "success", "Integrity Check Complete",
            f'Integrity check "{check.name}" completed successfully.',
        )
        return check

    async def _finish_check(self, check_id: str, user: CurrentUser) -> None:
        try:
            await asyncio.sleep(self._check_seconds)
            await self.complete_check(check_id, user)
        finally:
            self._forget(check_id)

    # ── Maintenance mode ─────────────────────────────────────

    async def set_maintenance_mode(self, enabled: bool, user: CurrentUser) -> SystemHealth:
        await self._require(
            user, Permission.SCHEDULE_MAINTENANCE,
            "You do not have permission to change maintenance mode.",
        )
        self._health.maintenance_status.maintenance_mode = enabled
        self._health.overall_status = "maintenance" if enabled else "healthy"
        self._health.last_updated = _utcnow()

        if enabled:
            await self.notifications.add(
                user.user_id, "warning", "Maintenance Mode Enabled",
                "The platform is now in maintenance mode.",
            )
        else:
            await self.notifications.add(
                user.user_id, "success", "Maintenance Mode Disabled",
                "The platform is back in normal operation.",
            )
        await self.audit.record(
            user, "configure", "system",
            f"Maintenance mode {'enabled' if enabled else 'disabled'}",
            severity="high", new_values={"maintenanceMode": enabled},
        )
        logger.warning("Maintenance mode set to %s by %s", enabled, user.user_id)
        return self._health

    async def enable_maintenance_mode(self, user: CurrentUser) -> SystemHealth:
        return await self.set_maintenance_mode(True, user)

    async def disable_maintenance_mode(self, user: CurrentUser) -> SystemHealth:
        return await self.set_maintenance_mode(False, user)

    # ── Health ───────────────────────────────────────────────

    def refresh_health(self, rng: random.Random | None = None) -> SystemHealth:
        rng = rng or self._rng
        metrics = self._health.performance_metrics
        metrics.database_response_time_ms = 30 + math.floor(rng.random() * 50)
        metrics.memory_usage_percentage = 60 + math.floor(rng.random() * 20)
        metrics.cpu_usage_percentage = 15 + math.floor(rng.random() * 30)
        self._health.last_updated = _utcnow()
        return self._health

    async def poll_health(self, interval_seconds: int | None = None) -> None:
        """Refresh the health snapshot forever; started from the app lifespan."""
        interval = interval_seconds or get_settings().health_refresh_seconds
        while True:
            await asyncio.sleep(interval)
            self.refresh_health()
            logger.debug("System health refreshed")

    async def shutdown(self) -> None:
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()


_service: BackupService | None = None


def get_backup_service() -> BackupService:
    global _service
    if _service is None:
        _service = BackupService()
    return _service
