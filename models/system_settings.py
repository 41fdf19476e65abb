"""System settings panel models: settings, feature flags, platform health."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import Field

from models.base import CamelModel

SettingCategory = Literal[
    "general", "security", "performance", "notifications", "integrations",
    "ui_customization", "data_retention", "backup", "monitoring", "compliance",
    "email", "authentication", "api", "features", "advanced",
]
SettingType = Literal[
    "boolean", "string", "number", "select", "multi_select", "json",
    "password", "url", "email", "color", "file", "datetime", "duration",
]
AccessLevel = Literal["system", "organization", "user", "public"]
FeatureFlagStatus = Literal["draft", "active", "paused", "completed", "archived", "error"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SettingValidation(CamelModel):
    required: bool = False
    min_value: float | None = None
    max_value: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    allowed_values: list[Any] | None = None
    error_message: str | None = None


class SettingChange(CamelModel):
    timestamp: datetime = Field(default_factory=_utcnow)
    user_id: str
    user_name: str
    old_value: Any = None
    new_value: Any = None
    reason: str | None = None
    ip_address: str | None = None


class SettingMetadata(CamelModel):
    tags: list[str] = Field(default_factory=list)
    documentation_url: str | None = None
    help_text: str | None = None
    impact_level: Literal["low", "medium", "high", "critical"] = "low"
    rollback_supported: bool = True
    preview_supported: bool = False


class SystemSetting(CamelModel):
    id: str
    category: SettingCategory
    key: str
    name: str
    description: str = ""
    type: SettingType
    value: Any = None
    default_value: Any = None
    validation: SettingValidation = Field(default_factory=SettingValidation)
    access_level: AccessLevel = "organization"
    feature_flag: str | None = None
    environment_specific: bool = False
    restart_required: bool = False
    last_modified: datetime = Field(default_factory=_utcnow)
    modified_by: str = ""
    change_history: list[SettingChange] = Field(default_factory=list)
    metadata: SettingMetadata = Field(default_factory=SettingMetadata)


class FeatureFlagCondition(CamelModel):
    type: Literal["user_id", "organization_id", "role", "plan", "country", "custom"]
    operator: Literal["equals", "not_equals", "in", "not_in", "contains", "starts_with"]
    value: Any


class RolloutStep(CamelModel):
    percentage: int
    date: datetime
    duration_hours: int


class FeatureFlagSchedule(CamelModel):
    start_date: datetime | None = None
    end_date: datetime | None = None
    timezone: str = "UTC"
    recurring: bool = False
    rollout_schedule: list[RolloutStep] = Field(default_factory=list)


class FeatureFlagMetrics(CamelModel):
    adoption_rate: float = 0.0
    error_rate: float = 0.0
    performance_impact: float = 0.0
    user_satisfaction: float = 0.0
    rollback_count: int = 0
    last_rollback: datetime | None = None


class FeatureFlag(CamelModel):
    id: str
    name: str
    description: str = ""
    key: str
    enabled: bool = False
    rollout_percentage: int = Field(default=0, ge=0, le=100)
    target_groups: list[str] = Field(default_factory=list)
    conditions: list[FeatureFlagCondition] = Field(default_factory=list)
    schedule: FeatureFlagSchedule | None = None
    metrics: FeatureFlagMetrics = Field(default_factory=FeatureFlagMetrics)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    created_by: str = ""
    status: FeatureFlagStatus = "draft"


class PlatformHealth(CamelModel):
    status: str = "healthy"
    label: str = "Healthy"
    uptime: float = 0.0
    cpu_usage: float = 0.0
    memory_usage: float = 0.0
    disk_usage: float = 0.0
    active_connections: int = 0
    response_time: int = 0
    error_rate: float = 0.0
    last_backup: datetime | None = None
    pending_updates: int = 0


# ── Requests / responses ─────────────────────────────────────


class StageChangeRequest(CamelModel):
    value: Any = None


class SaveSettingsRequest(CamelModel):
    confirm_restart: bool = False


class SaveSettingsResult(CamelModel):
    saved: int = 0
    restart_required: list[str] = Field(default_factory=list)
    message: str = ""


class FeatureFlagToggle(CamelModel):
    enabled: bool


class RolloutUpdate(CamelModel):
    percentage: int
