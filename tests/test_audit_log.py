"""Tests for services/audit_log.py — filters, export, alerts, live stream."""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

import pytest

from errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from models.audit import (
    AuditAlertCondition,
    AuditAlertCreate,
    AuditFilter,
    DateRange,
    ExportConfig,
    StreamConfig,
)
from models.user import CurrentUser
from services import mock_data
from services.audit_log import (
    CSV_HEADER,
    AuditLogService,
    apply_filters,
    condition_matches,
    cooldown_elapsed,
    resolve_date_range,
)


@pytest.fixture
def entries():
    return mock_data.get_audit_logs()


@pytest.fixture
def service(entries, notifications, rng):
    return AuditLogService(notifications=notifications, rng=rng, entries=entries)


def _probability(value):
    s = MagicMock()
    s.audit_new_entry_probability = value
    return s


# ---------------------------------------------------------------------------
# Date presets
# ---------------------------------------------------------------------------

NOW = datetime(2024, 10, 9, 15, 30, tzinfo=timezone.utc)


def test_today_and_yesterday_start_at_midnight():
    assert resolve_date_range("today", NOW).start == datetime(2024, 10, 9, tzinfo=timezone.utc)
    assert resolve_date_range("yesterday", NOW).start == datetime(2024, 10, 8, tzinfo=timezone.utc)


@pytest.mark.parametrize("preset,days", [("week", 7), ("month", 30), ("quarter", 90), ("year", 365)])
def test_rolling_presets(preset, days):
    r = resolve_date_range(preset, NOW)
    assert r.end - r.start == timedelta(days=days)
    assert r.preset == preset


def test_custom_preset_has_no_resolution():
    with pytest.raises(ValidationFailedError):
        resolve_date_range("custom", NOW)


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------

def test_default_filter_returns_newest_first(entries):
    ids = [e.id for e in apply_filters(entries, AuditFilter())]
    assert ids == ["audit_4", "audit_3", "audit_2", "audit_1"]


def test_date_range_excludes_older_entries(entries):
    now = datetime.now(timezone.utc)
    f = AuditFilter(date_range=DateRange(start=now - timedelta(minutes=10), end=now, preset="custom"))
    assert [e.id for e in apply_filters(entries, f)] == ["audit_4", "audit_3"]


def test_offset_less_custom_range_is_read_as_utc(entries):
    f = AuditFilter.model_validate({
        "dateRange": {"start": "2020-01-01T00:00:00", "end": "2099-01-01T00:00:00", "preset": "custom"},
    })
    assert f.date_range.start == datetime(2020, 1, 1, tzinfo=timezone.utc)
    assert len(apply_filters(entries, f)) == 4


@pytest.mark.parametrize("query,expected", [
    ("jane", ["audit_2"]),
    ("MALICIOUS", ["audit_3"]),
    ("203.0.113", ["audit_3"]),
    ("suspicious", ["audit_3"]),
    ("backup", ["audit_4"]),
])
def test_search_fields(entries, query, expected):
    assert [e.id for e in apply_filters(entries, AuditFilter(search_query=query))] == expected


def test_list_filters_combine(entries):
    f = AuditFilter(actions=["login"], outcomes=["failure"])
    assert [e.id for e in apply_filters(entries, f)] == ["audit_3"]
    f = AuditFilter(severities=["low"], categories=["system_admin", "authentication"])
    assert [e.id for e in apply_filters(entries, f)] == ["audit_4", "audit_1"]


def test_ip_and_tag_filters(entries):
    assert [e.id for e in apply_filters(entries, AuditFilter(ip_addresses=["10.0."]))] == ["audit_4"]
    assert [e.id for e in apply_filters(entries, AuditFilter(tags=["debate", "web"]))] == ["audit_2", "audit_1"]


def test_get_unknown_entry(service):
    with pytest.raises(NotFoundError):
        service.get("audit_missing")


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_export_requires_permission(service, notifications):
    viewer = CurrentUser(user_id="guest", role="guest")
    with pytest.raises(PermissionDeniedError):
        await service.export(ExportConfig(), AuditFilter(), viewer)
    [note] = await notifications.list("guest")
    assert note.type == "error"
    assert note.title == "Export Denied"


@pytest.mark.asyncio
async def test_export_csv(service, teacher, notifications):
    content, media_type, filename = await service.export(ExportConfig(format="csv"), AuditFilter(), teacher)
    lines = content.strip().split("\n")
    assert lines[0] == ",".join(CSV_HEADER)
    assert len(lines) == 5
    assert media_type == "text/csv"
    assert filename == "audit_logs.csv"
    assert '"Created new debate session: ""Climate Change Discussion"""' in content
    row = next(line for line in lines if "Successful admin login" in line)
    assert ',"System Admin",login,' in row
    assert row.endswith(',"Successful admin login from web interface"')

    [note] = await notifications.list(teacher.user_id)
    assert note.title == "Export Started"


@pytest.mark.asyncio
async def test_export_is_itself_audited(service, teacher):
    await service.export(ExportConfig(format="csv"), AuditFilter(), teacher)
    newest = service.entries[0]
    assert newest.action == "export_data"
    assert newest.resource == "audit_log"
    assert newest.user_id == teacher.user_id


@pytest.mark.asyncio
async def test_export_json_caps_and_drops_metadata(service, teacher):
    config = ExportConfig(format="json", include_metadata=False, max_records=2)
    content, media_type, _ = await service.export(config, AuditFilter(), teacher)
    rows = json.loads(content)
    assert len(rows) == 2
    assert "metadata" not in rows[0]
    assert "userName" in rows[0]
    assert media_type == "application/json"


@pytest.mark.asyncio
@pytest.mark.parametrize("fmt", ["pdf", "excel"])
async def test_export_unsupported_formats(service, teacher, notifications, fmt):
    with pytest.raises(ValidationFailedError):
        await service.export(ExportConfig(format=fmt), AuditFilter(), teacher)
    [note] = await notifications.list(teacher.user_id)
    assert note.type == "info"


# ---------------------------------------------------------------------------
# Alerts
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("operator,field,value,expected", [
    ("equals", "action", "LOGIN", True),
    ("contains", "user_email", "malicious", True),
    ("starts_with", "ipAddress", "203.", True),
    ("ends_with", "details.description", "credentials", True),
    ("greater_than", "details.response_code", 400, True),
    ("less_than", "details.execution_time", 100, False),
    ("in", "tags", ["suspicious", "other"], True),
    ("not_in", "severity", ["high", "critical"], False),
    ("equals", "no.such.field", "x", False),
])
def test_condition_operators(entries, operator, field, value, expected):
    failed_login = next(e for e in entries if e.id == "audit_3")
    cond = AuditAlertCondition(field=field, operator=operator, value=value)
    assert condition_matches(failed_login, cond) is expected


def test_case_sensitive_condition(entries):
    failed_login = next(e for e in entries if e.id == "audit_3")
    cond = AuditAlertCondition(field="user_name", operator="equals", value="unknown", case_sensitive=True)
    assert condition_matches(failed_login, cond) is False


def test_cooldown(service, admin):
    alert = service.add_alert(AuditAlertCreate(name="a", cooldown_period=15), admin)
    now = datetime.now(timezone.utc)
    assert cooldown_elapsed(alert, now) is True
    alert.last_triggered = now - timedelta(minutes=5)
    assert cooldown_elapsed(alert, now) is False


@pytest.mark.asyncio
async def test_alert_fires_once_within_cooldown(service, admin, notifications):
    alert = service.add_alert(AuditAlertCreate(
        name="Role changes",
        severity="high",
        conditions=[AuditAlertCondition(field="action", operator="equals", value="configure")],
    ), admin)

    await service.record(admin, "configure", "system", "Maintenance mode enabled")
    await service.record(admin, "configure", "system", "Maintenance mode disabled")

    assert alert.trigger_count == 1
    assert alert.last_triggered is not None
    [note] = await notifications.list(admin.user_id)
    assert note.title == "Audit Alert: Role changes"
    assert note.type == "warning"


@pytest.mark.asyncio
async def test_disabled_alert_does_not_fire(service, admin):
    alert = service.add_alert(AuditAlertCreate(
        name="Any",
        conditions=[AuditAlertCondition(field="resource", operator="equals", value="system")],
    ), admin)
    service.set_alert_enabled(alert.id, False)
    await service.record(admin, "backup", "system", "Backup started")
    assert alert.trigger_count == 0


def test_remove_unknown_alert(service):
    with pytest.raises(NotFoundError):
        service.remove_alert("alert_missing")


# ---------------------------------------------------------------------------
# Live stream
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_tick_without_luck_adds_nothing(service, teacher):
    with patch("services.audit_log.get_settings", return_value=_probability(0.0)):
        assert await service.tick(teacher, StreamConfig()) is None
    assert len(service.entries) == 4


@pytest.mark.asyncio
async def test_tick_prepends_and_truncates(service, teacher):
    config = StreamConfig(max_entries=3, show_notifications=False)
    with patch("services.audit_log.get_settings", return_value=_probability(1.0)):
        entry = await service.tick(teacher, config)
    assert service.entries[0] is entry
    assert len(service.entries) == 3
    assert "real-time" in entry.tags


@pytest.mark.asyncio
async def test_tick_notifies_highlighted_severity(service, teacher, notifications):
    config = StreamConfig(highlight_severity=["low", "medium", "high", "critical"])
    with patch("services.audit_log.get_settings", return_value=_probability(1.0)):
        entry = await service.tick(teacher, config)
    [note] = await notifications.list(teacher.user_id)
    assert note.title == f"{entry.severity.upper()} Audit Event"
    assert note.type == ("error" if entry.severity == "critical" else "warning")


@pytest.mark.asyncio
async def test_stream_yields_generated_entries(service, teacher):
    config = StreamConfig(refresh_interval=0, show_notifications=False)
    with patch("services.audit_log.get_settings", return_value=_probability(1.0)):
        stream = service.stream(teacher, config)
        first = await stream.__anext__()
        second = await stream.__anext__()
        await stream.aclose()
    assert first.id != second.id
    assert service.entries[0] is second
