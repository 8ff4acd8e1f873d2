"""LinkedRecordValidator — checks link fields before a write is sent."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from ..correlation import get_logger
from ..exceptions import LinkedRecordNotFoundError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ..schema import Column, DataSourceSchema

    SchemaLoader = Callable[[str], Awaitable[DataSourceSchema]]
    RecordFetcher = Callable[[DataSourceSchema, str], Awaitable[dict[str, Any] | None]]

logger = get_logger(__name__)


class LinkedRecordValidator:
    """Resolve every linked id of a write payload against its table.

    Link fields are list-valued on the backend, so scalar values are
    wrapped in a list. Each id costs one schema lookup and one point
    fetch. Lookups run one at a time unless ``concurrency`` allows more;
    the semaphore caps in-flight lookups across all link fields.
    """

    def __init__(
        self,
        get_schema: SchemaLoader,
        fetch_record: RecordFetcher,
        *,
        concurrency: int = 1,
    ) -> None:
        self._get_schema = get_schema
        self._fetch_record = fetch_record
        self._concurrency = max(1, concurrency)

    async def validate(
        self, schema: DataSourceSchema, data: dict[str, Any]
    ) -> dict[str, Any]:
        """Return a copy of ``data`` with link values coerced to lists.

        Raises:
            LinkedRecordNotFoundError: a linked id does not resolve.
        """
        result = dict(data)
        checks: list[tuple[str, str, str]] = []

        for column in schema.columns:
            if not column.foreign_key:
                continue
            ids = self._link_ids(column, result.get(column.field))
            if ids is None:
                continue
            result[column.field] = ids

            relation = schema.relation_for(column.field)
            if relation is None:
                logger.warning(
                    "[airtable] No relation for link field %s.%s; not validated",
                    schema.table,
                    column.field,
                )
                continue
            checks.extend((relation.table, column.field, i) for i in ids)

        if self._concurrency == 1:
            for table, field, record_id in checks:
                await self._check(table, field, record_id)
        else:
            semaphore = asyncio.Semaphore(self._concurrency)

            async def _bounded(table: str, field: str, record_id: str) -> None:
                async with semaphore:
                    await self._check(table, field, record_id)

            tasks = [asyncio.ensure_future(_bounded(*c)) for c in checks]
            try:
                await asyncio.gather(*tasks)
            finally:
                # First failure wins; nothing may outlive the call.
                for task in tasks:
                    if not task.done():
                        task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
        return result

    @staticmethod
    def _link_ids(column: Column, value: Any) -> list[str] | None:
        if value is None or value == "" or value == []:
            return None
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return [str(value)]

    async def _check(self, table: str, column: str, record_id: str) -> None:
        linked_schema = await self._get_schema(table)
        record = await self._fetch_record(linked_schema, record_id)
        if record is None:
            logger.warning(
                "[airtable] Linked record %s not found in %s (via %s)",
                record_id,
                table,
                column,
            )
            raise LinkedRecordNotFoundError(table, column, record_id)
