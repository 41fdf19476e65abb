"""Backup jobs, maintenance windows, integrity checks and system health."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from models.base import CamelModel

BackupType = Literal["full", "incremental", "differential", "snapshot", "continuous"]
BackupStatus = Literal["scheduled", "running", "completed", "failed", "cancelled", "paused"]
BackupStage = Literal[
    "preparing", "backing_up", "compressing", "encrypting", "uploading", "verifying", "cleanup",
]
MaintenanceType = Literal["scheduled", "emergency", "routine", "upgrade", "security", "database"]
MaintenanceStatus = Literal["scheduled", "active", "completed", "cancelled", "postponed"]
CheckStatus = Literal["scheduled", "running", "completed", "failed", "disabled"]
ImpactLevel = Literal["low", "medium", "high", "critical"]


# ── Backups ──────────────────────────────────────────────────


class BackupSource(CamelModel):
    type: Literal[
        "database", "files", "application_data", "user_data", "system_config", "custom",
    ] = "database"
    includes: list[str] = Field(default_factory=list)
    excludes: list[str] = Field(default_factory=list)


class BackupDestination(CamelModel):
    type: Literal["local", "s3", "azure", "gcp", "ftp", "sftp", "custom"] = "local"
    location: str
    region: str | None = None
    bucket: str | None = None
    path: str | None = None
    validation: bool = True


class RetryPolicy(CamelModel):
    max_attempts: int = 3
    delay_minutes: int = 5
    exponential_backoff: bool = True
    max_delay_minutes: int = 30


class BackupSchedule(CamelModel):
    enabled: bool = True
    frequency: Literal["manual", "hourly", "daily", "weekly", "monthly", "custom"] = "daily"
    cron_expression: str | None = None
    time_of_day: str | None = None
    timezone: str = "UTC"
    max_concurrent_jobs: int = 1
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)


class RetentionPolicy(CamelModel):
    enabled: bool = True
    keep_daily: int = 7
    keep_weekly: int = 4
    keep_monthly: int = 3
    keep_yearly: int = 1
    max_backup_age_days: int = 365
    max_backup_count: int = 100
    auto_cleanup: bool = True
    storage_limit_gb: float | None = None


class CompressionSettings(CamelModel):
    enabled: bool = True
    algorithm: Literal["gzip", "bzip2", "lz4", "zstd", "none"] = "zstd"
    level: int = Field(default=6, ge=1, le=9)


class EncryptionSettings(CamelModel):
    enabled: bool = True
    algorithm: Literal["aes256", "aes128", "chacha20", "gpg"] = "aes256"
    key_source: Literal["password", "keyfile", "hsm", "env_var"] = "env_var"
    key_rotation_days: int | None = None


class BackupProgress(CamelModel):
    stage: BackupStage = "preparing"
    percentage: int = 0
    current_file: str | None = None
    files_processed: int = 0
    files_total: int = 0
    bytes_processed: int = 0
    bytes_total: int = 0
    speed_mbps: float = 0.0
    eta_minutes: int = 0
    started_at: datetime


class BackupHistory(CamelModel):
    id: str
    backup_job_id: str
    started_at: datetime
    completed_at: datetime | None = None
    duration_minutes: float | None = None
    status: BackupStatus
    size_bytes: int = 0
    files_count: int = 0
    error_message: str | None = None
    warning_count: int = 0
    destination_path: str = ""
    checksum: str | None = None
    verification_status: Literal["passed", "failed", "skipped"] | None = None


class BackupJob(CamelModel):
    id: str
    name: str
    description: str = ""
    type: BackupType = "full"
    source: BackupSource = Field(default_factory=BackupSource)
    destination: BackupDestination
    schedule: BackupSchedule = Field(default_factory=BackupSchedule)
    retention: RetentionPolicy = Field(default_factory=RetentionPolicy)
    compression: CompressionSettings = Field(default_factory=CompressionSettings)
    encryption: EncryptionSettings = Field(default_factory=EncryptionSettings)
    status: BackupStatus = "scheduled"
    progress: BackupProgress | None = None
    history: list[BackupHistory] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    last_run: datetime | None = None
    next_run: datetime | None = None
    created_by: str = ""


# ── Maintenance windows ──────────────────────────────────────


class MaintenanceNotificationSettings(CamelModel):
    enabled: bool = True
    advance_notice_hours: list[int] = Field(default_factory=list)
    notification_channels: list[str] = Field(default_factory=list)
    custom_message: str | None = None
    user_groups: list[str] = Field(default_factory=list)


class MaintenanceTask(CamelModel):
    id: str
    name: str
    description: str = ""
    type: Literal[
        "database", "file_system", "service_restart", "deployment", "configuration", "custom",
    ] = "custom"
    order: int
    estimated_duration_minutes: int = 0
    status: Literal["pending", "running", "completed", "failed", "skipped"] = "pending"
    started_at: datetime | None = None
    completed_at: datetime | None = None
    dependencies: list[str] = Field(default_factory=list)


class MaintenanceWindow(CamelModel):
    id: str
    name: str
    description: str = ""
    type: MaintenanceType
    status: MaintenanceStatus
    impact_level: ImpactLevel = "low"
    affected_services: list[str] = Field(default_factory=list)
    start_time: datetime
    end_time: datetime
    timezone: str = "UTC"
    notification_settings: MaintenanceNotificationSettings = Field(
        default_factory=MaintenanceNotificationSettings
    )
    tasks: list[MaintenanceTask] = Field(default_factory=list)
    created_by: str = ""
    created_at: datetime
    updated_at: datetime


# ── Integrity checks ─────────────────────────────────────────


class IntegrityIssue(CamelModel):
    type: str
    severity: ImpactLevel
    message: str
    location: str = ""
    recommended_action: str = ""
    auto_repairable: bool = False


class IntegrityResult(CamelModel):
    id: str
    check_id: str
    timestamp: datetime
    status: Literal["passed", "warning", "failed", "error"]
    score: int = Field(ge=0, le=100)
    issues_found: list[IntegrityIssue] = Field(default_factory=list)
    duration_ms: int = 0
    details: dict[str, Any] = Field(default_factory=dict)


class IntegrityCheck(CamelModel):
    id: str
    name: str
    description: str = ""
    type: Literal[
        "database", "file_system", "application", "configuration", "permissions", "custom",
    ] = "database"
    status: CheckStatus = "scheduled"
    last_run: datetime | None = None
    next_run: datetime | None = None
    results: list[IntegrityResult] = Field(default_factory=list)
    auto_repair: bool = False
    created_at: datetime
    updated_at: datetime


# ── System health ────────────────────────────────────────────


class BackupHealthStatus(CamelModel):
    last_successful_backup: datetime | None = None
    failed_backups_24h: int = 0
    average_backup_duration_minutes: float = 0.0
    storage_usage_gb: float = 0.0
    next_scheduled_backup: datetime | None = None


class MaintenanceHealthStatus(CamelModel):
    maintenance_mode: bool = False
    upcoming_maintenance: list[MaintenanceWindow] = Field(default_factory=list)
    overdue_maintenance: int = 0
    average_maintenance_duration_hours: float = 0.0


class IntegrityHealthStatus(CamelModel):
    issues_detected: int = 0
    critical_issues: int = 0
    last_integrity_check: datetime | None = None
    auto_repairs_applied_24h: int = 0
    integrity_score: int = 100


class StorageUsage(CamelModel):
    backup_storage_gb: float = 0.0
    backup_storage_limit_gb: float = 0.0
    database_size_gb: float = 0.0
    file_storage_gb: float = 0.0
    temp_storage_gb: float = 0.0
    available_storage_gb: float = 0.0


class PerformanceMetrics(CamelModel):
    backup_speed_mbps: float = 0.0
    database_response_time_ms: int = 0
    file_system_io_ops: int = 0
    memory_usage_percentage: int = 0
    cpu_usage_percentage: int = 0


class SystemHealth(CamelModel):
    overall_status: Literal["healthy", "warning", "critical", "maintenance"] = "healthy"
    last_updated: datetime
    uptime_percentage: float = 100.0
    backup_status: BackupHealthStatus = Field(default_factory=BackupHealthStatus)
    maintenance_status: MaintenanceHealthStatus = Field(default_factory=MaintenanceHealthStatus)
    integrity_status: IntegrityHealthStatus = Field(default_factory=IntegrityHealthStatus)
    storage_usage: StorageUsage = Field(default_factory=StorageUsage)
    performance_metrics: PerformanceMetrics = Field(default_factory=PerformanceMetrics)
