"""IDataSource — the uniform CRUD surface every backend adapter provides."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..query import Sort, Where
    from ..responses import DeleteResponse, FindManyResponse, IsUniqueResponse
    from ..schema import DataSourceSchema


class DataSourceType(str, Enum):
    """Backends selectable by connection string scheme."""

    AIRTABLE = "airtable"


@runtime_checkable
class IDataSource(Protocol):
    """
    Backend adapter contract.

    Each operation is request-scoped and stateless: the adapter holds a
    transport and collaborators, never record state. Callers drive it with
    a :class:`DataSourceSchema` obtained from :meth:`get_schema`::

        schema = await datasource.get_schema("Orders")
        page = await datasource.find_many(schema, [Where("Status", "=", "open")])
    """

    type: DataSourceType

    async def check_connection(self) -> bool: ...

    async def list_tables(self) -> list[str]: ...

    async def get_schema(self, table: str) -> DataSourceSchema: ...

    async def create_one(
        self, schema: DataSourceSchema, data: dict[str, Any]
    ) -> dict[str, Any]: ...

    async def find_one(
        self,
        schema: DataSourceSchema,
        where: Sequence[Where],
        fields: Sequence[str] | None = None,
    ) -> dict[str, Any] | None: ...

    async def find_many(
        self,
        schema: DataSourceSchema,
        where: Sequence[Where] = (),
        fields: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int = 0,
        sort: Sequence[Sort] | None = None,
    ) -> FindManyResponse: ...

    async def find_total_records(
        self, schema: DataSourceSchema, where: Sequence[Where] = ()
    ) -> int: ...

    async def update_one(
        self, schema: DataSourceSchema, record_id: str, data: dict[str, Any]
    ) -> dict[str, Any]: ...

    async def delete_one(
        self,
        schema: DataSourceSchema,
        record_id: str,
        soft_delete: str | None = None,
    ) -> DeleteResponse: ...

    async def create_table(self, schema: DataSourceSchema) -> bool: ...

    async def truncate(self, table: str) -> None: ...

    async def unique_check(
        self, schema: DataSourceSchema, data: dict[str, Any]
    ) -> IsUniqueResponse: ...

    async def close(self) -> None: ...
