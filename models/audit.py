"""Audit log viewer models."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Literal

from pydantic import Field

from models.base import CamelModel, UtcDatetime

AuditAction = Literal[
    "create", "read", "update", "delete", "login", "logout", "reset_password",
    "change_role", "impersonate", "export_data", "import_data", "backup",
    "restore", "configure", "approve", "reject", "escalate", "archive",
]
AuditResource = Literal[
    "user", "role", "organization", "class", "session", "debate",
    "analytics", "report", "system", "audit_log", "settings", "integration",
]
AuditSeverity = Literal["low", "medium", "high", "critical"]
AuditCategory = Literal[
    "authentication", "authorization", "data_access", "data_modification",
    "system_admin", "user_admin", "security", "compliance", "performance", "error",
]
AuditOutcome = Literal["success", "failure", "partial", "warning"]
DatePreset = Literal["today", "yesterday", "week", "month", "quarter", "year", "custom"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _week_ago() -> datetime:
    return _utcnow() - timedelta(days=7)


class AuditDetails(CamelModel):
    description: str
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None
    affected_entities: list[str] | None = None
    error_message: str | None = None
    response_code: int | None = None
    execution_time: int | None = None  # milliseconds
    data_size: int | None = None  # bytes


class DeviceInfo(CamelModel):
    type: Literal["desktop", "tablet", "mobile", "server"] = "desktop"
    os: str = ""
    browser: str = ""
    timezone: str = "UTC"
    language: str = "en-US"


class Geolocation(CamelModel):
    country: str = ""
    region: str = ""
    city: str = ""


class AuditMetadata(CamelModel):
    source: Literal["web", "mobile", "api", "system", "batch_job", "webhook"] = "web"
    version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "production"
    region: str = "us-east-1"
    device_info: DeviceInfo | None = None
    geolocation: Geolocation | None = None


class AuditRetention(CamelModel):
    retention_period: int = 365  # days
    compliance_category: Literal["standard", "sensitive", "regulated", "permanent"] = "standard"


class AuditLogEntry(CamelModel):
    id: str = Field(default_factory=lambda: f"audit_{uuid.uuid4().hex[:12]}")
    timestamp: UtcDatetime = Field(default_factory=_utcnow)
    user_id: str
    user_email: str = ""
    user_name: str = ""
    action: AuditAction
    resource: AuditResource
    resource_id: str = ""
    details: AuditDetails
    metadata: AuditMetadata = Field(default_factory=AuditMetadata)
    severity: AuditSeverity = "low"
    category: AuditCategory = "data_access"
    outcome: AuditOutcome = "success"
    ip_address: str = ""
    user_agent: str = ""
    session_id: str = ""
    organization_id: str = ""
    correlation_id: str | None = None
    tags: list[str] = Field(default_factory=list)
    retention: AuditRetention = Field(default_factory=AuditRetention)


class DateRange(CamelModel):
    start: UtcDatetime = Field(default_factory=_week_ago)
    end: UtcDatetime = Field(default_factory=_utcnow)
    preset: DatePreset = "week"


class AuditFilter(CamelModel):
    date_range: DateRange = Field(default_factory=DateRange)
    users: list[str] = Field(default_factory=list)
    actions: list[AuditAction] = Field(default_factory=list)
    resources: list[AuditResource] = Field(default_factory=list)
    severities: list[AuditSeverity] = Field(default_factory=list)
    categories: list[AuditCategory] = Field(default_factory=list)
    outcomes: list[AuditOutcome] = Field(default_factory=list)
    organizations: list[str] = Field(default_factory=list)
    ip_addresses: list[str] = Field(default_factory=list)
    search_query: str = ""
    tags: list[str] = Field(default_factory=list)


class AuditAlertCondition(CamelModel):
    field: str
    operator: Literal[
        "equals", "contains", "starts_with", "ends_with",
        "greater_than", "less_than", "in", "not_in",
    ]
    value: Any
    case_sensitive: bool = False


class AuditAlertAction(CamelModel):
    type: Literal["email", "webhook", "slack", "teams", "sms", "in_app"] = "in_app"
    config: dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True


class AuditAlert(CamelModel):
    id: str = Field(default_factory=lambda: f"alert_{uuid.uuid4().hex[:8]}")
    name: str
    description: str = ""
    enabled: bool = True
    conditions: list[AuditAlertCondition] = Field(default_factory=list)
    actions: list[AuditAlertAction] = Field(default_factory=list)
    severity: AuditSeverity = "medium"
    cooldown_period: int = 15  # minutes
    last_triggered: datetime | None = None
    trigger_count: int = 0
    created_at: datetime = Field(default_factory=_utcnow)
    created_by: str = ""


class AuditAlertCreate(CamelModel):
    name: str
    description: str = ""
    conditions: list[AuditAlertCondition] = Field(default_factory=list)
    actions: list[AuditAlertAction] = Field(default_factory=list)
    severity: AuditSeverity = "medium"
    cooldown_period: int = 15


class StreamConfig(CamelModel):
    enabled: bool = True
    max_entries: int = 1000
    refresh_interval: int = 5000  # milliseconds
    show_notifications: bool = True
    highlight_severity: list[AuditSeverity] = Field(default_factory=lambda: ["high", "critical"])


class ExportConfig(CamelModel):
    format: Literal["csv", "json", "xml", "pdf", "excel"] = "csv"
    include_metadata: bool = True
    include_details: bool = True
    max_records: int = 10000


class AuditExportRequest(CamelModel):
    """POST /api/audit/export — request body."""

    config: ExportConfig = Field(default_factory=ExportConfig)
    filter: AuditFilter = Field(default_factory=AuditFilter)


class AuditQueryResponse(CamelModel):
    total: int
    entries: list[AuditLogEntry]
