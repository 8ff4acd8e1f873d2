"""CachedSchemaProvider — read-through schema cache over any data source."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .correlation import get_logger
from .schema import DataSourceSchema

if TYPE_CHECKING:
    from .ports.cache import ICacheService
    from .ports.datasource import IDataSource

logger = get_logger("datagate.schema_cache")

SCHEMA_NAMESPACE = "schema"
DEFAULT_SCHEMA_TTL = 300


class CachedSchemaProvider:
    """
    Read-through cache for :meth:`IDataSource.get_schema`.

    Pattern:
    - get_schema(table): Check cache -> Delegate to data source -> Cache result
    - invalidate(table): Drop ``schema:<table>``

    Cache failures are logged and treated as misses.
    """

    def __init__(
        self,
        datasource: IDataSource,
        cache: ICacheService,
        ttl: int = DEFAULT_SCHEMA_TTL,
    ) -> None:
        self._datasource = datasource
        self._cache = cache
        self._ttl = ttl

    @staticmethod
    def key(table: str) -> str:
        return f"{SCHEMA_NAMESPACE}:{table}"

    async def get_schema(self, table: str) -> DataSourceSchema:
        key = self.key(table)

        try:
            cached = await self._cache.get(key, cls=DataSourceSchema)
            if cached:
                return cached  # type: ignore[no-any-return]
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache get failed for key %s: %s", key, e)

        schema = await self._datasource.get_schema(table)

        try:
            await self._cache.set(key, schema, ttl=self._ttl)
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache set failed for key %s: %s", key, e)
        return schema

    async def invalidate(self, table: str) -> None:
        key = self.key(table)
        try:
            await self._cache.delete(key)
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache invalidate failed for key %s: %s", key, e)

    async def clear(self) -> None:
        """Drop every cached schema."""
        try:
            await self._cache.clear_namespace(f"{SCHEMA_NAMESPACE}:")
        except Exception as e:  # noqa: BLE001
            logger.warning("Cache clear failed for %s: %s", SCHEMA_NAMESPACE, e)
