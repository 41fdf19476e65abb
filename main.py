"""FastAPI entry point for the debate dashboard service."""

import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import get_settings
from errors import DashboardError
from services.backend_client import get_backend_client
from services.backup import get_backup_service
from services.concurrency import ConcurrencyLimitMiddleware
from services.middleware import RequestIdMiddleware
from services.notifications import (
    RedisNotificationStore,
    get_notification_center,
    periodic_cleanup,
)
from services.session_log import get_session_log_service

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle — start/stop shared resources."""
    client = get_backend_client()
    await client.start()

    store = get_notification_center()
    if isinstance(store, RedisNotificationStore):
        if await store.ping():
            logger.info("Redis connection verified")
        else:
            logger.warning("Redis connection failed — notifications may not persist")

    backups = get_backup_service()
    tasks = [
        asyncio.create_task(periodic_cleanup(interval_seconds=300)),
        asyncio.create_task(backups.poll_health(settings.health_refresh_seconds)),
        asyncio.create_task(get_session_log_service().run_auto_log(settings.auto_log_interval_seconds)),
    ]

    yield

    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
    await backups.shutdown()

    if isinstance(store, RedisNotificationStore):
        await store.close()
    await client.close()


app = FastAPI(
    title="Debate Dashboard Service",
    description="Backend-for-frontend for the teacher and admin debate dashboard",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# ── Middleware stack (outermost first) ─────────────────────────
# CORS → RequestId → ConcurrencyLimit → route handler
app.add_middleware(ConcurrencyLimitMiddleware)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Register routers ────────────────────────────────────────
from api.analytics import router as analytics_router  # noqa: E402
from api.audit import router as audit_router  # noqa: E402
from api.classes import router as classes_router  # noqa: E402
from api.health import router as health_router  # noqa: E402
from api.maintenance import router as maintenance_router  # noqa: E402
from api.notifications import router as notifications_router  # noqa: E402
from api.reflections import router as reflections_router  # noqa: E402
from api.reports import router as reports_router  # noqa: E402
from api.search import router as search_router  # noqa: E402
from api.session_logs import router as session_logs_router  # noqa: E402
from api.sessions import router as sessions_router  # noqa: E402
from api.settings import router as settings_router  # noqa: E402

app.include_router(health_router)
app.include_router(notifications_router)
app.include_router(sessions_router)
app.include_router(classes_router)
app.include_router(reflections_router)
app.include_router(audit_router)
app.include_router(maintenance_router)
app.include_router(settings_router)
app.include_router(session_logs_router)
app.include_router(analytics_router)
app.include_router(reports_router)
app.include_router(search_router)


if __name__ == "__main__":
    if settings.debug:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.service_port,
            reload=True,
        )
    else:
        # Production: gunicorn main:app -c deploy/gunicorn.conf.py
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.service_port,
            workers=4,
            timeout_keep_alive=120,
        )
