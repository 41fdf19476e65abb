"""Mock-data switches shared by the dashboard services.

``USE_MOCK_DATA`` skips the backend entirely.  Otherwise a failed upstream
call may degrade to mock data when ``MOCK_FALLBACK_ON_ERROR`` is on; every
such degradation is logged and counted in the metrics collector.
"""

from __future__ import annotations

import logging

from config.settings import get_settings
from services.metrics import get_metrics_collector

logger = logging.getLogger(__name__)


def should_use_mock() -> bool:
    return get_settings().use_mock_data


def fall_back(source: str, exc: BaseException) -> bool:
    """Record an upstream failure; True when the caller may serve mock data."""
    logger.exception("%s: upstream failed (%s), considering mock fallback", source, exc)
    if not get_settings().mock_fallback_on_error:
        return False
    get_metrics_collector().record_fallback(source)
    return True
