"""Shared pytest fixtures for the dashboard service tests.

Provides:
- ``notifications``: fresh InMemoryNotificationStore per test
- ``teacher`` / ``admin``: CurrentUser identities with role-derived permissions
- ``rng``: seeded ``random.Random`` so generated data is deterministic
- ``api_client``: httpx.AsyncClient bound to the FastAPI app

Mock mode is forced before any settings are read so no test touches a
real backend unless it patches ``should_use_mock`` explicitly.
"""

from __future__ import annotations

import os
import random

os.environ.setdefault("USE_MOCK_DATA", "true")
os.environ.setdefault("NOTIFICATION_STORE_TYPE", "memory")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from models.user import CurrentUser  # noqa: E402
from services.notifications import InMemoryNotificationStore  # noqa: E402


@pytest.fixture(autouse=True)
def reset_singletons():
    """Process-wide dashboard state is rebuilt for every test."""
    import api.deps
    import services.audit_log
    import services.backup
    import services.class_detail
    import services.notifications
    import services.reflection_review
    import services.reports
    import services.search
    import services.session_log
    import services.system_settings
    from services.concurrency import reset_heavy_semaphore

    modules = (
        services.audit_log,
        services.backup,
        services.class_detail,
        services.reflection_review,
        services.reports,
        services.session_log,
        services.system_settings,
    )
    for mod in modules:
        mod._service = None
    services.notifications._center = None
    services.search._debouncer = None
    reset_heavy_semaphore()
    api.deps.clear_auth_cache()
    yield
    for mod in modules:
        mod._service = None
    services.notifications._center = None


@pytest.fixture
def notifications() -> InMemoryNotificationStore:
    return InMemoryNotificationStore()


@pytest.fixture
def teacher() -> CurrentUser:
    return CurrentUser(user_id="t-001", role="teacher", name="Ms. Rivera", email="rivera@school.edu")


@pytest.fixture
def admin() -> CurrentUser:
    return CurrentUser(user_id="a-001", role="admin", name="Admin User", email="admin@school.edu")


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
async def api_client():
    from main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
