"""Pydantic Settings — typed configuration with .env auto-loading."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment / .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ── Service ──────────────────────────────────────────────
    service_name: str = "debate-dashboard-service"
    service_port: int = 5000
    cors_origins: list[str] = ["*"]
    debug: bool = False

    # ── Platform Backend ─────────────────────────────────────
    backend_base_url: str = "http://localhost:3001"
    backend_api_prefix: str = "/api"
    backend_access_token: str = ""  # service token, used when no caller token is forwarded
    backend_timeout: int = 15  # seconds
    use_mock_data: bool = False  # skip the backend entirely and serve mock data
    mock_fallback_on_error: bool = True  # serve mock data when the backend call fails
    auth_cache_ttl: int = 300  # seconds a verified bearer token stays cached

    # ── Notifications ────────────────────────────────────────
    notification_store_type: str = "memory"  # "memory" or "redis"
    notification_max_per_user: int = 100
    notification_ttl: int = 86400  # seconds (1 day)
    redis_url: str = ""  # e.g. redis://:password@host:6379/0

    # ── Audit Stream ─────────────────────────────────────────
    audit_refresh_interval_ms: int = 5000
    audit_max_entries: int = 1000
    audit_new_entry_probability: float = 0.3
    audit_export_max_records: int = 10000

    # ── Backup / Maintenance ─────────────────────────────────
    backup_tick_seconds: float = 1.0
    integrity_check_seconds: float = 3.0
    health_refresh_seconds: int = 30

    # ── Session Logging ──────────────────────────────────────
    auto_log_interval_seconds: int = 60

    # ── Search ───────────────────────────────────────────────
    search_debounce_ms: int = 500
    search_min_query_length: int = 2
    search_result_limit: int = 20

    # ── Concurrency ──────────────────────────────────────────
    max_concurrent_heavy: int = 15  # per worker: SSE streams, exports, reports


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton."""
    return Settings()
