"""Liveness probe plus upstream call metrics."""

from fastapi import APIRouter

from config.settings import get_settings
from services.backend_client import get_backend_client
from services.metrics import get_metrics_collector

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health():
    settings = get_settings()
    return {
        "status": "healthy",
        "service": settings.service_name,
        "mockData": settings.use_mock_data,
        "notificationStore": settings.notification_store_type,
        "circuitOpen": get_backend_client().circuit_open,
        "metrics": get_metrics_collector().snapshot(),
    }
