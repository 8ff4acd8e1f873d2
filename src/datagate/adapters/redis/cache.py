"""Redis implementation of the cache collaborator."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from ...ports.cache import ICacheService

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger("datagate.redis_cache")


class RedisCacheService(ICacheService):
    """
    Redis implementation of ICacheService.

    Values are stored as JSON under ``namespace + key`` so several gateways
    can share one Redis. Any Redis failure degrades to a cache miss: the
    schemas it holds can always be re-derived from the backend.
    """

    def __init__(
        self,
        redis_client: Redis[bytes],
        *,
        namespace: str = "datagate:",
        default_ttl: int | None = None,
    ) -> None:
        self._redis = redis_client
        self._namespace = namespace
        self._default_ttl = default_ttl

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    async def get(self, key: str, cls: type[Any] | None = None) -> Any | None:
        try:
            raw = await self._redis.get(self._key(key))
        except Exception as e:  # noqa: BLE001
            logger.warning("Redis get failed for key %s: %s", key, e)
            return None
        if not raw:
            return None
        try:
            if cls is not None and hasattr(cls, "model_validate_json"):
                return cls.model_validate_json(raw)
            return json.loads(raw)
        except ValueError as e:
            # Stale or foreign payload; drop it so the next set() replaces it.
            logger.warning("Discarding undecodable cache entry %s: %s", key, e)
            await self.delete(key)
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        if hasattr(value, "model_dump_json"):
            payload = value.model_dump_json()
        else:
            payload = json.dumps(value, default=str)
        ttl = ttl if ttl is not None else self._default_ttl
        try:
            if ttl:
                await self._redis.setex(self._key(key), ttl, payload)
            else:
                await self._redis.set(self._key(key), payload)
        except Exception as e:  # noqa: BLE001
            logger.warning("Redis set failed for key %s: %s", key, e)

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(self._key(key))
        except Exception as e:  # noqa: BLE001
            logger.warning("Redis delete failed for key %s: %s", key, e)

    async def clear_namespace(self, prefix: str) -> None:
        """Delete every key under ``prefix`` (uses SCAN, so it is not cheap)."""
        pattern = f"{self._key(prefix)}*"
        try:
            cursor: int = 0
            while True:
                cursor, keys = await self._redis.scan(cursor, match=pattern)
                if keys:
                    await self._redis.delete(*keys)
                if cursor == 0:
                    break
        except Exception as e:  # noqa: BLE001
            logger.warning("Redis clear_namespace failed for %s: %s", prefix, e)
