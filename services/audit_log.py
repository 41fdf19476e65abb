"""Audit log viewer — bounded in-memory log, filters, export, alerts, live stream.

The log starts from the mock fixtures and grows two ways:

- :meth:`AuditLogService.record` — the dashboard's own administrative actions
  (settings saved, backups run, maintenance mode toggled, logs exported).
- :meth:`AuditLogService.stream` — the simulated real-time feed served over
  SSE, which appends a random entry with a fixed probability per tick.
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncGenerator

from config.settings import get_settings
from errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from models.audit import (
    AuditAlert,
    AuditAlertCondition,
    AuditAlertCreate,
    AuditDetails,
    AuditFilter,
    AuditLogEntry,
    DateRange,
    ExportConfig,
    StreamConfig,
)
from models.user import CurrentUser, Permission
from services import mock_data
from services.notifications import NotificationStore, get_notification_center

logger = logging.getLogger(__name__)

CSV_HEADER = ["Timestamp", "User", "Action", "Resource", "Outcome", "Severity", "IP Address", "Description"]

_PRESET_DAYS = {"week": 7, "month": 30, "quarter": 90, "year": 365}


def resolve_date_range(preset: str, now: datetime | None = None) -> DateRange:
    """Translate a preset into concrete bounds ending at *now*."""
    now = now or datetime.now(timezone.utc)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if preset == "today":
        start = midnight
    elif preset == "yesterday":
        start = midnight - timedelta(days=1)
    elif preset in _PRESET_DAYS:
        start = now - timedelta(days=_PRESET_DAYS[preset])
    else:
        raise ValidationFailedError(f"Unknown date preset: {preset}", field="preset")
    return DateRange(start=start, end=now, preset=preset)


def _matches_search(entry: AuditLogEntry, query: str) -> bool:
    q = query.lower()
    return (
        q in entry.details.description.lower()
        or q in entry.user_name.lower()
        or q in entry.user_email.lower()
        or q in entry.action.lower()
        or q in entry.resource.lower()
        or q in entry.ip_address
        or any(q in tag.lower() for tag in entry.tags)
    )


def apply_filters(entries: list[AuditLogEntry], f: AuditFilter) -> list[AuditLogEntry]:
    """Apply every filter in *f*; empty lists disable their filter.  Newest first."""
    result = [e for e in entries if f.date_range.start <= e.timestamp <= f.date_range.end]

    if f.search_query:
        result = [e for e in result if _matches_search(e, f.search_query)]
    if f.users:
        result = [e for e in result if e.user_id in f.users]
    if f.actions:
        result = [e for e in result if e.action in f.actions]
    if f.resources:
        result = [e for e in result if e.resource in f.resources]
    if f.severities:
        result = [e for e in result if e.severity in f.severities]
    if f.categories:
        result = [e for e in result if e.category in f.categories]
    if f.outcomes:
        result = [e for e in result if e.outcome in f.outcomes]
    if f.organizations:
        result = [e for e in result if e.organization_id in f.organizations]
    if f.ip_addresses:
        result = [e for e in result if any(ip in e.ip_address for ip in f.ip_addresses)]
    if f.tags:
        result = [e for e in result if any(tag in e.tags for tag in f.tags)]

    result.sort(key=lambda e: e.timestamp, reverse=True)
    return result


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def _quoted(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def to_csv(entries: list[AuditLogEntry]) -> str:
    """User and description are always quoted; the other columns never need it."""
    lines = [",".join(CSV_HEADER)]
    for e in entries:
        lines.append(",".join([
            e.timestamp.isoformat(),
            _quoted(e.user_name),
            e.action,
            e.resource,
            e.outcome,
            e.severity,
            e.ip_address,
            _quoted(e.details.description),
        ]))
    return "\n".join(lines) + "\n"


def to_json(entries: list[AuditLogEntry], config: ExportConfig) -> str:
    exclude: set[str] = set()
    if not config.include_metadata:
        exclude.add("metadata")
    if not config.include_details:
        exclude.add("details")
    payload = [e.model_dump(mode="json", by_alias=True, exclude=exclude) for e in entries]
    return json.dumps(payload, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------

def _lookup(data: dict[str, Any], path: str) -> Any:
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def _field_value(entry: AuditLogEntry, field: str) -> Any:
    value = _lookup(entry.model_dump(), field)
    if value is None:
        value = _lookup(entry.model_dump(by_alias=True), field)
    return value


def _as_text(value: Any, case_sensitive: bool) -> str:
    text = str(value)
    return text if case_sensitive else text.lower()


def condition_matches(entry: AuditLogEntry, cond: AuditAlertCondition) -> bool:
    actual = _field_value(entry, cond.field)
    if actual is None:
        return False
    op = cond.operator

    if op in ("greater_than", "less_than"):
        try:
            a, b = float(actual), float(cond.value)
        except (TypeError, ValueError):
            return False
        return a > b if op == "greater_than" else a < b

    cs = cond.case_sensitive
    if op in ("in", "not_in"):
        options = cond.value if isinstance(cond.value, list) else [cond.value]
        wanted = {_as_text(v, cs) for v in options}
        values = actual if isinstance(actual, list) else [actual]
        hit = any(_as_text(v, cs) in wanted for v in values)
        return hit if op == "in" else not hit

    needle = _as_text(cond.value, cs)
    values = actual if isinstance(actual, list) else [actual]
    for v in values:
        text = _as_text(v, cs)
        if op == "equals" and text == needle:
            return True
        if op == "contains" and needle in text:
            return True
        if op == "starts_with" and text.startswith(needle):
            return True
        if op == "ends_with" and text.endswith(needle):
            return True
    return False


def alert_matches(alert: AuditAlert, entry: AuditLogEntry) -> bool:
    return alert.enabled and bool(alert.conditions) and all(
        condition_matches(entry, c) for c in alert.conditions
    )


def cooldown_elapsed(alert: AuditAlert, now: datetime) -> bool:
    if alert.last_triggered is None:
        return True
    return now - alert.last_triggered >= timedelta(minutes=alert.cooldown_period)


_ALERT_NOTIFICATION_TYPE = {"critical": "error", "high": "warning", "medium": "warning", "low": "info"}


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class AuditLogService:
    """Holds the audit log and its alert rules for this process."""

    def __init__(
        self,
        notifications: NotificationStore | None = None,
        rng: random.Random | None = None,
        entries: list[AuditLogEntry] | None = None,
    ):
        settings = get_settings()
        self._notifications = notifications
        self._rng = rng or random.Random()
        self._max_entries = settings.audit_max_entries
        self._entries: list[AuditLogEntry] = (
            list(entries) if entries is not None else mock_data.get_audit_logs()
        )
        self._alerts: list[AuditAlert] = []

    @property
    def notifications(self) -> NotificationStore:
        return self._notifications or get_notification_center()

    @property
    def entries(self) -> list[AuditLogEntry]:
        return list(self._entries)

    def query(self, f: AuditFilter) -> list[AuditLogEntry]:
        return apply_filters(self._entries, f)

    def get(self, entry_id: str) -> AuditLogEntry:
        for e in self._entries:
            if e.id == entry_id:
                return e
        raise NotFoundError("audit_log", entry_id)

    async def _ingest(self, entry: AuditLogEntry, max_entries: int | None = None) -> None:
        self._entries.insert(0, entry)
        del self._entries[max_entries or self._max_entries:]
        await self._evaluate_alerts(entry)

    async def record(
        self,
        user: CurrentUser,
        action: str,
        resource: str,
        description: str,
        *,
        resource_id: str = "",
        severity: str = "low",
        category: str = "system_admin",
        outcome: str = "success",
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLogEntry:
        """Append an entry describing one of this service's own actions."""
        entry = AuditLogEntry(
            user_id=user.user_id,
            user_email=user.email,
            user_name=user.name or user.user_id,
            action=action,
            resource=resource,
            resource_id=resource_id,
            details=AuditDetails(
                description=description, old_values=old_values, new_values=new_values,
            ),
            severity=severity,
            category=category,
            outcome=outcome,
            tags=[action, resource],
        )
        await self._ingest(entry)
        logger.info("Audit: %s %s %s by %s", action, resource, resource_id, user.user_id)
        return entry

    # -- export --------------------------------------------------------------

    async def export(
        self, config: ExportConfig, f: AuditFilter, user: CurrentUser
    ) -> tuple[str, str, str]:
        """Return ``(content, media_type, filename)`` for the filtered log."""
        if not user.has(Permission.EXPORT_LOGS):
            await self.notifications.add(
                user.user_id, "error", "Export Denied",
                "You do not have permission to export audit logs.",
            )
            raise PermissionDeniedError(Permission.EXPORT_LOGS.value)

        if config.format == "pdf":
            await self.notifications.add(
                user.user_id, "info", "PDF Export",
                "PDF export is not available; use CSV or JSON.",
            )
            raise ValidationFailedError("PDF export is not supported", field="format")
        if config.format == "excel":
            await self.notifications.add(
                user.user_id, "info", "Excel Export",
                "Excel export is not available; use CSV or JSON.",
            )
            raise ValidationFailedError("Excel export is not supported", field="format")
        if config.format not in ("csv", "json"):
            raise ValidationFailedError(f"Unsupported export format: {config.format}", field="format")

        cap = min(config.max_records, get_settings().audit_export_max_records)
        rows = apply_filters(self._entries, f)[:cap]

        if config.format == "csv":
            content, media_type = to_csv(rows), "text/csv"
        else:
            content, media_type = to_json(rows, config), "application/json"

        await self.notifications.add(
            user.user_id, "success", "Export Started",
            f"Exporting {len(rows)} audit log entries as {config.format.upper()}",
        )
        await self.record(
            user, "export_data", "audit_log",
            f"Exported {len(rows)} audit log entries as {config.format.upper()}",
            category="data_access",
        )
        return content, media_type, f"audit_logs.{config.format}"

    # -- alerts --------------------------------------------------------------

    @property
    def alerts(self) -> list[AuditAlert]:
        return list(self._alerts)

    def add_alert(self, req: AuditAlertCreate, user: CurrentUser) -> AuditAlert:
        alert = AuditAlert(**req.model_dump(), created_by=user.user_id)
        self._alerts.append(alert)
        return alert

    def remove_alert(self, alert_id: str) -> None:
        before = len(self._alerts)
        self._alerts = [a for a in self._alerts if a.id != alert_id]
        if len(self._alerts) == before:
            raise NotFoundError("audit_alert", alert_id)

    def set_alert_enabled(self, alert_id: str, enabled: bool) -> AuditAlert:
        for a in self._alerts:
            if a.id == alert_id:
                a.enabled = enabled
                return a
        raise NotFoundError("audit_alert", alert_id)

    async def _evaluate_alerts(self, entry: AuditLogEntry) -> list[AuditAlert]:
        fired = []
        now = datetime.now(timezone.utc)
        for alert in self._alerts:
            if not alert_matches(alert, entry) or not cooldown_elapsed(alert, now):
                continue
            alert.trigger_count += 1
            alert.last_triggered = now
            fired.append(alert)
            logger.warning("Audit alert %s fired on %s", alert.name, entry.id)
            if alert.created_by:
                await self.notifications.add(
                    alert.created_by,
                    _ALERT_NOTIFICATION_TYPE.get(alert.severity, "info"),
                    f"Audit Alert: {alert.name}",
                    f"{entry.action} on {entry.resource} by {entry.user_name}",
                )
        return fired

    # -- live stream ---------------------------------------------------------

    async def tick(self, user: CurrentUser, config: StreamConfig) -> AuditLogEntry | None:
        """One stream interval: maybe generate an entry, ingest it and notify."""
        if self._rng.random() >= get_settings().audit_new_entry_probability:
            return None
        entry = mock_data.generate_audit_entry(self._rng)
        await self._ingest(entry, config.max_entries)
        if config.show_notifications and entry.severity in config.highlight_severity:
            await self.notifications.add(
                user.user_id,
                "error" if entry.severity == "critical" else "warning",
                f"{entry.severity.upper()} Audit Event",
                f"{entry.action} on {entry.resource} by {entry.user_name}",
            )
        return entry

    async def stream(
        self, user: CurrentUser, config: StreamConfig
    ) -> AsyncGenerator[AuditLogEntry, None]:
        """Yield new entries as they appear, one check per refresh interval."""
        interval = config.refresh_interval / 1000
        while config.enabled:
            await asyncio.sleep(interval)
            entry = await self.tick(user, config)
            if entry is not None:
                yield entry


_service: AuditLogService | None = None


def get_audit_log_service() -> AuditLogService:
    global _service
    if _service is None:
        _service = AuditLogService()
    return _service
