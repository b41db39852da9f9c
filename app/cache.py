import json
import logging

import redis.asyncio as redis

from app.config import settings

logger = logging.getLogger(__name__)

# session.info key holding event ids whose cache entries are purged again after commit
_PENDING_EVENT_IDS = "events_cache_pending"


class CacheManager:
    """
    Cache-aside manager backed by Redis.

    Every public method tolerates an unavailable Redis: reads report a
    miss and writes are skipped, so event reads fall through to the
    database instead of failing the request.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits: int = 0
        self._misses: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection pool at application startup."""
        self._redis = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await self._redis.ping()
            logger.info("Redis connected: %s", settings.REDIS_URL)
        except Exception as exc:  # pragma: no cover
            logger.warning("Redis ping failed, event cache disabled: %s", exc)
            await self._redis.aclose()
            self._redis = None

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Core cache operations
    # ------------------------------------------------------------------

    async def get(self, key: str) -> dict | list | None:
        """Return the cached value for *key*, or None on a miss / error."""
        if not self._redis:
            self._misses += 1
            return None
        try:
            data = await self._redis.get(key)
            if data is not None:
                self._hits += 1
                return json.loads(data)
            self._misses += 1
            return None
        except Exception as exc:
            logger.debug("Cache GET error for key=%r: %s", key, exc)
            self._misses += 1
            return None

    async def set(self, key: str, value: dict | list, ttl: int | None = None) -> None:
        """
        Store *value* under *key* with an optional TTL (seconds).

        Dates are serialised through ``default=str``.
        """
        if not self._redis:
            return
        try:
            await self._redis.set(key, json.dumps(value, default=str), ex=ttl)
        except Exception as exc:
            logger.debug("Cache SET error for key=%r: %s", key, exc)

    async def delete_pattern(self, pattern: str) -> None:
        """Delete all keys matching *pattern* using SCAN."""
        if not self._redis:
            return
        try:
            keys: list[str] = [key async for key in self._redis.scan_iter(match=pattern)]
            if keys:
                await self._redis.delete(*keys)
                logger.debug("Cache invalidated %d key(s) matching %r", len(keys), pattern)
        except Exception as exc:
            logger.debug("Cache DELETE_PATTERN error for pattern=%r: %s", pattern, exc)

    # ------------------------------------------------------------------
    # Event invalidation
    # ------------------------------------------------------------------

    async def invalidate_events(self, event_id: int | None = None, session=None) -> None:
        """
        Drop cached event reads after a write.

        Logistics-by-date listings are always purged since any new event,
        logistics item or cost change may alter them.  The detail entry
        is removed when *event_id* is given.

        When the write belongs to *session*, the same keys are recorded in
        ``session.info`` and purged again by ``invalidate_committed`` once
        the transaction commits, so a read racing the commit cannot leave
        the pre-commit state cached.
        """
        await self.delete_pattern("events:logistics:*")
        if event_id is not None:
            await self.delete_pattern(f"events:detail:{event_id}")
        if session is not None:
            session.info.setdefault(_PENDING_EVENT_IDS, set()).add(event_id)

    async def invalidate_committed(self, session) -> None:
        """Repeat the invalidations recorded on *session*; call after commit."""
        for event_id in session.info.pop(_PENDING_EVENT_IDS, ()):
            await self.invalidate_events(event_id)

    @property
    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }


cache = CacheManager()
