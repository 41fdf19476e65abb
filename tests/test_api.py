"""FastAPI endpoint tests using httpx.AsyncClient."""

import pytest

from services.backup import get_backup_service

ADMIN = {"X-User-Id": "a-001", "X-User-Role": "admin", "X-User-Name": "Admin User"}
STUDENT = {"X-User-Id": "s-001", "X-User-Role": "student"}


@pytest.mark.asyncio
async def test_health(api_client):
    resp = await api_client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert data["mockData"] is True
    assert data["circuitOpen"] is False
    assert "x-request-id" in resp.headers


# ── Notifications ────────────────────────────────────────────


@pytest.mark.asyncio
async def test_notification_lifecycle(api_client):
    resp = await api_client.post("/api/notifications", json={"type": "info", "title": "Hello"})
    assert resp.status_code == 201
    nid = resp.json()["id"]

    assert (await api_client.get("/api/notifications/unread-count")).json() == {"count": 1}
    assert (await api_client.post(f"/api/notifications/{nid}/read")).json() == {"ok": True}
    assert (await api_client.get("/api/notifications", params={"unread_only": True})).json() == []

    resp = await api_client.post("/api/notifications/ntf-missing/read")
    assert resp.status_code == 404

    await api_client.delete("/api/notifications")
    assert (await api_client.get("/api/notifications")).json() == []


# ── Sessions & classes ───────────────────────────────────────


@pytest.mark.asyncio
async def test_wizard_data(api_client):
    resp = await api_client.get("/api/sessions/wizard/data")
    assert resp.status_code == 200
    data = resp.json()
    assert data["source"] == "mock"
    assert data["formats"]
    assert data["topics"]
    assert data["students"]


@pytest.mark.asyncio
async def test_incomplete_draft_rejected(api_client):
    resp = await api_client.post("/api/sessions", json={"title": "Plastics"})
    assert resp.status_code == 422
    assert resp.json()["detail"].startswith("Incomplete steps:")


@pytest.mark.asyncio
async def test_session_list(api_client):
    resp = await api_client.get("/api/sessions", params={"tab": "all"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["sessions"]
    assert sum(data["counts"].values()) >= len(data["sessions"])


@pytest.mark.asyncio
async def test_class_detail(api_client):
    resp = await api_client.get("/api/classes/class1")
    assert resp.status_code == 200
    data = resp.json()
    assert data["classData"]["name"] == "Advanced Biology"
    assert data["source"] == "mock"


# ── Reflections ──────────────────────────────────────────────


@pytest.mark.asyncio
async def test_reflection_queue_and_stats(api_client):
    resp = await api_client.get("/api/reflections", params={"sortBy": "student_name"})
    assert resp.status_code == 200
    queue = resp.json()
    assert len(queue) == 6

    stats = (await api_client.get("/api/reflections/stats")).json()
    assert stats["total"] == 6


@pytest.mark.asyncio
async def test_feedback_without_rating_is_422(api_client):
    queue = (await api_client.get("/api/reflections")).json()
    resp = await api_client.post(f"/api/reflections/{queue[0]['id']}/feedback", json={"specificComments": "ok"})
    assert resp.status_code == 422


# ── Audit ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_audit_query(api_client):
    resp = await api_client.post("/api/audit/query", json={"dateRange": {"preset": "year"}})
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == len(data["entries"])
    assert data["total"] > 0


@pytest.mark.asyncio
async def test_audit_custom_range_without_offset(api_client):
    date_range = {"start": "2020-01-01T00:00:00", "end": "2099-01-01T00:00:00", "preset": "custom"}
    resp = await api_client.post("/api/audit/query", json={"dateRange": date_range})
    assert resp.status_code == 200
    assert resp.json()["total"] > 0

    resp = await api_client.post(
        "/api/audit/export", json={"config": {"format": "csv"}, "filter": {"dateRange": date_range}},
    )
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_audit_forbidden_for_students(api_client):
    resp = await api_client.post("/api/audit/query", json={}, headers=STUDENT)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_audit_export_csv(api_client):
    resp = await api_client.post("/api/audit/export", json={"config": {"format": "csv"}})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert 'filename="audit_logs.csv"' in resp.headers["content-disposition"]


@pytest.mark.asyncio
async def test_unknown_audit_entry(api_client):
    resp = await api_client.get("/api/audit/audit_missing")
    assert resp.status_code == 404


# ── Maintenance & settings ───────────────────────────────────


@pytest.mark.asyncio
async def test_run_backup_by_role(api_client):
    resp = await api_client.post("/api/maintenance/backups/backup_1/run")
    assert resp.status_code == 403

    resp = await api_client.post("/api/maintenance/backups/backup_1/run", headers=ADMIN)
    assert resp.status_code == 202
    assert resp.json()["status"] == "running"

    resp = await api_client.post("/api/maintenance/backups/backup_1/run", headers=ADMIN)
    assert resp.status_code == 409
    await get_backup_service().shutdown()


@pytest.mark.asyncio
async def test_stage_and_save_setting(api_client):
    resp = await api_client.put("/api/settings/setting_1", json={"value": "Debate Club"})
    assert resp.status_code == 403

    resp = await api_client.put("/api/settings/setting_1", json={"value": "Debate Club"}, headers=ADMIN)
    assert resp.status_code == 200
    assert resp.json()["value"] == "Debate Club"

    resp = await api_client.post("/api/settings/save", json={}, headers=ADMIN)
    assert resp.json()["saved"] == 1


@pytest.mark.asyncio
async def test_invalid_setting_value(api_client):
    resp = await api_client.put("/api/settings/setting_2", json={"value": 5}, headers=ADMIN)
    assert resp.status_code == 422
    assert resp.json()["detail"] == "Session timeout must be between 15 minutes and 24 hours"


# ── Session logs ─────────────────────────────────────────────


@pytest.mark.asyncio
async def test_session_log_flow(api_client):
    body = {"sessionTitle": "Plastics Ban", "participants": [{"id": "p1", "name": "Sarah Johnson"}]}
    resp = await api_client.post("/api/session-logs/s-9", json=body)
    assert resp.status_code == 201
    assert resp.json()["id"] == "log_s-9"

    resp = await api_client.post(
        "/api/session-logs/s-9/observations", json={"content": "Strong opening", "category": "positive"},
    )
    assert resp.status_code == 201
    assert resp.json()["title"] == "Positive Observation"

    resp = await api_client.post("/api/session-logs/s-9/lock", json={"reason": "Session complete"})
    assert resp.json()["isLocked"] is True

    resp = await api_client.post("/api/session-logs/s-9/observations", json={"content": "Late"})
    assert resp.status_code == 423

    resp = await api_client.get("/api/session-logs/s-9/export", params={"format": "csv"})
    assert resp.status_code == 200
    assert resp.text.startswith("Type,Timestamp,Participant")


@pytest.mark.asyncio
async def test_unknown_session_log(api_client):
    resp = await api_client.get("/api/session-logs/nope")
    assert resp.status_code == 404


# ── Analytics, reports, search ───────────────────────────────


@pytest.mark.asyncio
async def test_analytics_dashboard(api_client):
    resp = await api_client.get("/api/analytics/dashboard", params={"classId": "class2"})
    assert resp.status_code == 200
    assert resp.json()["selectedClass"]["className"] == "World History"


@pytest.mark.asyncio
async def test_engagement_heat_map(api_client):
    resp = await api_client.get("/api/analytics/engagement", params={"timeframe": "week", "metric": "time_spent"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["days"] == 7
    assert len(data["dayLabels"]) == 7
    assert len(data["cells"]) == 12 * 7


@pytest.mark.asyncio
async def test_generate_and_export_report(api_client):
    resp = await api_client.post("/api/reports/generate", json={"config": {"type": "administrative"}})
    assert resp.status_code == 200
    assert resp.json()["title"] == "Administrative Overview"

    resp = await api_client.post("/api/reports/export", json={})
    assert resp.status_code == 200
    assert resp.text.startswith("Student,Overall Progress")


@pytest.mark.asyncio
async def test_search(api_client):
    resp = await api_client.get("/api/search", params={"q": "civics", "scope": "classes", "debounce": False})
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert [r["title"] for r in data["results"]] == ["Civics & Debate"]
