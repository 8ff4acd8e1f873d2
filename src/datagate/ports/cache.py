"""ICacheService - Protocol for the short-TTL cache collaborator."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ICacheService(Protocol):
    """
    Abstract interface for caching services.

    Keys follow ``<resource>:<table>[:<identifier>]``, e.g. ``schema:Orders``.
    """

    async def get(self, key: str, cls: type[Any] | None = None) -> Any | None:
        """
        Retrieve a value by key. Returns None if missing or expired.
        If cls is provided and is a Pydantic model, validation is performed.
        """
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Set a value with optional TTL (in seconds)."""
        ...

    async def delete(self, key: str) -> None:
        """Delete a value by key."""
        ...

    async def clear_namespace(self, prefix: str) -> None:
        """Clear all keys starting with prefix."""
        ...
