"""Notification center — per-user toast notifications for dashboard actions.

Services push a notification whenever a user-facing outcome happens (backup
started, export denied, settings saved...). The web UI polls
``GET /api/notifications`` and renders them.

Provides an abstract store with in-memory and Redis implementations; the
active one is chosen by ``NOTIFICATION_STORE_TYPE``.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

from models.notifications import Notification, NotificationType

logger = logging.getLogger(__name__)


# ── Abstract Interface ───────────────────────────────────────


class NotificationStore(ABC):
    """Abstract notification store — implement for different backends."""

    def __init__(self, max_per_user: int = 100, ttl_seconds: int = 86400):
        self._max_per_user = max_per_user
        self._ttl = ttl_seconds

    async def add(
        self,
        user_id: str,
        type: NotificationType,
        title: str,
        message: str = "",
    ) -> Notification:
        """Create and store a notification; the oldest are dropped past the cap."""
        notification = Notification(type=type, title=title, message=message)
        await self._push(user_id, notification)
        logger.debug("Notification for %s: [%s] %s", user_id, type, title)
        return notification

    @abstractmethod
    async def _push(self, user_id: str, notification: Notification) -> None:
        ...

    @abstractmethod
    async def list(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        """Return the user's notifications, newest first."""
        ...

    @abstractmethod
    async def mark_read(self, user_id: str, notification_id: str) -> bool:
        """Mark one notification read.  Returns False if it does not exist."""
        ...

    @abstractmethod
    async def mark_all_read(self, user_id: str) -> int:
        """Mark every notification read.  Returns how many changed."""
        ...

    @abstractmethod
    async def clear(self, user_id: str) -> None:
        ...

    async def unread_count(self, user_id: str) -> int:
        return len(await self.list(user_id, unread_only=True))

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Remove notifications older than the TTL.  Returns count removed."""
        ...


# ── In-Memory Implementation ────────────────────────────────


class InMemoryNotificationStore(NotificationStore):
    """Per-process store.  Suitable for single-worker deployments."""

    def __init__(self, max_per_user: int = 100, ttl_seconds: int = 86400):
        super().__init__(max_per_user, ttl_seconds)
        self._store: dict[str, list[Notification]] = {}

    async def _push(self, user_id: str, notification: Notification) -> None:
        items = self._store.setdefault(user_id, [])
        items.insert(0, notification)
        del items[self._max_per_user:]

    async def list(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        items = self._store.get(user_id, [])
        if unread_only:
            return [n for n in items if not n.read]
        return list(items)

    async def mark_read(self, user_id: str, notification_id: str) -> bool:
        for n in self._store.get(user_id, []):
            if n.id == notification_id:
                n.read = True
                return True
        return False

    async def mark_all_read(self, user_id: str) -> int:
        changed = 0
        for n in self._store.get(user_id, []):
            if not n.read:
                n.read = True
                changed += 1
        return changed

    async def clear(self, user_id: str) -> None:
        self._store.pop(user_id, None)

    async def cleanup_expired(self) -> int:
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=self._ttl)
        removed = 0
        for user_id in list(self._store):
            kept = [n for n in self._store[user_id] if n.timestamp >= cutoff]
            removed += len(self._store[user_id]) - len(kept)
            if kept:
                self._store[user_id] = kept
            else:
                del self._store[user_id]
        if removed:
            logger.info("Cleaned up %d expired notifications", removed)
        return removed


# ── Redis Implementation ─────────────────────────────────────


class RedisNotificationStore(NotificationStore):
    """Redis-backed store for multi-worker deployments.

    Each user's notifications are a Redis list of JSON documents, newest at
    the head, trimmed to ``max_per_user`` and expired with the key TTL.
    """

    _KEY_PREFIX = "ntf:"

    def __init__(self, redis_url: str, max_per_user: int = 100, ttl_seconds: int = 86400):
        super().__init__(max_per_user, ttl_seconds)
        import redis.asyncio as aioredis

        self._redis = aioredis.from_url(
            redis_url,
            decode_responses=True,
            socket_connect_timeout=10,
            socket_timeout=10,
        )

    def _key(self, user_id: str) -> str:
        return f"{self._KEY_PREFIX}{user_id}"

    async def _push(self, user_id: str, notification: Notification) -> None:
        key = self._key(user_id)
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.lpush(key, notification.model_dump_json())
            pipe.ltrim(key, 0, self._max_per_user - 1)
            pipe.expire(key, self._ttl)
            await pipe.execute()

    async def _load(self, user_id: str) -> list[Notification]:
        raw = await self._redis.lrange(self._key(user_id), 0, -1)
        items: list[Notification] = []
        for data in raw:
            try:
                items.append(Notification.model_validate_json(data))
            except ValueError:
                logger.warning("Failed to deserialize notification for %s", user_id)
        return items

    async def _replace(self, user_id: str, items: list[Notification]) -> None:
        key = self._key(user_id)
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.delete(key)
            if items:
                pipe.rpush(key, *(n.model_dump_json() for n in items))
                pipe.expire(key, self._ttl)
            await pipe.execute()

    async def list(self, user_id: str, unread_only: bool = False) -> list[Notification]:
        items = await self._load(user_id)
        if unread_only:
            return [n for n in items if not n.read]
        return items

    async def mark_read(self, user_id: str, notification_id: str) -> bool:
        items = await self._load(user_id)
        for n in items:
            if n.id == notification_id:
                n.read = True
                await self._replace(user_id, items)
                return True
        return False

    async def mark_all_read(self, user_id: str) -> int:
        items = await self._load(user_id)
        changed = sum(1 for n in items if not n.read)
        if changed:
            for n in items:
                n.read = True
            await self._replace(user_id, items)
        return changed

    async def clear(self, user_id: str) -> None:
        await self._redis.delete(self._key(user_id))

    async def cleanup_expired(self) -> int:
        # Key TTLs expire old notifications
        return 0

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._redis.aclose()

    async def ping(self) -> bool:
        """Check Redis connectivity."""
        try:
            return await self._redis.ping()
        except Exception:
            return False


# ── Module-level Singleton ───────────────────────────────────

_center: NotificationStore | None = None


def get_notification_center() -> NotificationStore:
    """Get the singleton notification store instance."""
    global _center
    if _center is None:
        from config.settings import get_settings

        settings = get_settings()
        cap = settings.notification_max_per_user
        ttl = settings.notification_ttl

        if settings.notification_store_type == "redis" and settings.redis_url:
            _center = RedisNotificationStore(
                redis_url=settings.redis_url,
                max_per_user=cap,
                ttl_seconds=ttl,
            )
            logger.info("Initialized RedisNotificationStore (cap=%d, TTL=%ds)", cap, ttl)
        else:
            _center = InMemoryNotificationStore(max_per_user=cap, ttl_seconds=ttl)
            logger.info("Initialized InMemoryNotificationStore (cap=%d, TTL=%ds)", cap, ttl)
    return _center


# ── Background Cleanup Task ──────────────────────────────────


async def periodic_cleanup(interval_seconds: int = 300) -> None:
    """Background task that periodically drops expired notifications.

    Should be started as an ``asyncio.Task`` in the FastAPI lifespan.
    """
    center = get_notification_center()
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await center.cleanup_expired()
        except Exception:
            logger.exception("Notification store cleanup failed")
