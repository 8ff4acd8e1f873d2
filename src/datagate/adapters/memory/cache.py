"""InMemoryCacheService — dict-backed TTL cache for tests and single processes."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from ...ports.cache import ICacheService

if TYPE_CHECKING:
    from collections.abc import Callable


class InMemoryCacheService(ICacheService):
    """In-memory implementation of ``ICacheService``.

    Entries expire lazily on read. Pydantic models are stored as-is and
    re-validated when ``cls`` is given.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._store: dict[str, tuple[Any, float | None]] = {}

    async def get(self, key: str, cls: type[Any] | None = None) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._store[key]
            return None
        if cls is not None and hasattr(cls, "model_validate") and not isinstance(
            value, cls
        ):
            return cls.model_validate(value)
        return value

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        self._store[key] = (value, expires_at)

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    async def clear_namespace(self, prefix: str) -> None:
        for key in [k for k in self._store if k.startswith(prefix)]:
            del self._store[key]

    def __len__(self) -> int:
        return len(self._store)
