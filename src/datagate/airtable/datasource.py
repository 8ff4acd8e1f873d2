"""AirtableDataSource — CRUD over one Airtable base."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from ..correlation import get_logger
from ..exceptions import (
    CreateFailedError,
    DataGateError,
    DataSourceConnectionError,
    DataSourceRequestError,
    DeleteFailedError,
    RecordNotFoundError,
    TableCreateFailedError,
    UpdateFailedError,
)
from ..pagination import Pagination
from ..ports.datasource import DataSourceType, IDataSource
from ..query import WhereOperator
from ..responses import DeleteResponse, FindManyResponse, IsUniqueResponse
from .connection import AirtableConnectionManager
from .formula_builder import AirtableFormulaBuilder
from .paginator import PAGE_SIZE_LIMIT, AirtablePaginator, path_segment, table_path
from .record_mapper import AirtableRecordMapper
from .relations import LinkedRecordValidator
from .schema_resolver import AirtableSchemaResolver

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    import httpx

    from ..config import DataSourceConfig
    from ..query import Sort, Where
    from ..schema import DataSourceSchema

logger = get_logger(__name__)

SOFT_DELETE_FORMAT = "%Y-%m-%d %H:%M:%S"
TRUNCATE_PAGE_SIZE = 10


class AirtableDataSource(IDataSource):
    """
    :class:`IDataSource` over the Airtable REST API.

    Stateless per call: every operation takes the schema it works on and
    re-reads whatever it needs from the backend. Only the HTTP client is
    kept between calls; use ``async with`` or :meth:`close` to release it.

    Link fields are validated before create/update by resolving every
    linked id. ``relation_concurrency`` caps how many of those lookups run
    at once (1 keeps them sequential).
    """

    type = DataSourceType.AIRTABLE

    def __init__(
        self,
        config: DataSourceConfig,
        *,
        connection: AirtableConnectionManager | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        formula_builder: AirtableFormulaBuilder | None = None,
        mapper: AirtableRecordMapper | None = None,
        relation_concurrency: int = 1,
    ) -> None:
        self._config = config
        self._connection = connection or AirtableConnectionManager(
            config, transport=transport
        )
        self._schemas = AirtableSchemaResolver(self._connection)
        self._paginator = AirtablePaginator(self._connection)
        self._formula = formula_builder or AirtableFormulaBuilder()
        self._mapper = mapper or AirtableRecordMapper()
        self._pagination = Pagination(config.default_limit)
        self._relations = LinkedRecordValidator(
            self.get_schema,
            self._fetch_record,
            concurrency=relation_concurrency,
        )

    @property
    def pagination(self) -> Pagination:
        return self._pagination

    def _path(self, table: str, record_id: str | None = None) -> str:
        path = table_path(self._connection.base_id, table)
        return f"{path}/{path_segment(record_id)}" if record_id else path

    # ── Lifecycle ────────────────────────────────────────────────────

    async def __aenter__(self) -> AirtableDataSource:
        await self._connection.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self._connection.close()

    async def check_connection(self) -> bool:
        logger.debug("[airtable] Check connection")
        return await self._connection.health_check()

    async def ensure_connection(self) -> None:
        """Probe the backend; raise if it cannot be used."""
        if not await self.check_connection():
            raise DataSourceConnectionError(
                f"Cannot connect to Airtable base {self._connection.base_id}"
            )

    # ── Schema ───────────────────────────────────────────────────────

    async def list_tables(self) -> list[str]:
        return await self._schemas.list_tables()

    async def get_schema(self, table: str) -> DataSourceSchema:
        return await self._schemas.get_schema(table)

    # ── Reads ────────────────────────────────────────────────────────

    async def _fetch_record(
        self, schema: DataSourceSchema, record_id: str
    ) -> dict[str, Any] | None:
        """Point lookup by record id; None if the backend answers 404."""
        try:
            return await self._connection.request(
                "GET", self._path(schema.table, record_id)
            )
        except DataSourceRequestError as e:
            if e.is_not_found:
                return None
            raise

    async def find_one(
        self,
        schema: DataSourceSchema,
        where: Sequence[Where],
        fields: Sequence[str] | None = None,
    ) -> dict[str, Any] | None:
        """Find one record.

        With an ``equals`` predicate on the primary key this is a direct
        fetch that raises :class:`RecordNotFoundError` when the id does not
        exist. Otherwise it returns the first match of :meth:`find_many`,
        or ``None``.
        """
        key = next(
            (
                w
                for w in where
                if w.column == schema.primary_key
                and w.operator == WhereOperator.EQUALS
            ),
            None,
        )
        if key is None:
            page = await self.find_many(schema, where, fields, limit=1)
            return page.data[0] if page.data else None

        logger.debug("[airtable] Find %s by id %s", schema.table, key.value)
        record = await self._fetch_record(schema, str(key.value))
        if record is None:
            raise RecordNotFoundError(schema.table, key.value)
        return self._mapper.normalize(record, schema, fields)

    def _effective_limit(self, limit: int | None) -> int:
        if limit is None or limit < 1:
            limit = self._config.default_limit
        return min(limit, PAGE_SIZE_LIMIT)

    async def find_many(
        self,
        schema: DataSourceSchema,
        where: Sequence[Where] = (),
        fields: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int = 0,
        sort: Sequence[Sort] | None = None,
    ) -> FindManyResponse:
        """Fetch one page of matching records.

        ``limit`` is capped at 100 (one backend page). Reaching ``offset``
        costs ``offset / 100`` extra requests, and ``total`` is an
        exhaustive count of all matches.
        """
        limit = self._effective_limit(limit)
        offset = max(0, offset)

        if self._formula.is_primary_key_lookup(where, schema):
            record = await self.find_one(schema, where, fields)
            data = [record] if record is not None else []
            return FindManyResponse(
                limit=limit,
                offset=offset,
                total=len(data),
                pagination=self._pagination.build(limit, offset, len(data), len(data)),
                data=data,
            )

        formula = self._formula.where_to_filter(where, schema)
        sort_spec = self._formula.build_sort(sort)
        field_list = self._formula.build_fields(schema, fields)
        logger.debug(
            "[airtable] Find many in %s: filter=%r limit=%s offset=%s",
            schema.table,
            formula,
            limit,
            offset,
        )

        total = await self._paginator.count(schema.table, formula=formula)

        records: list[dict[str, Any]] = []
        if offset < total:
            cursor, exhausted = await self._paginator.seek(
                schema.table, offset, formula=formula, sort=sort_spec
            )
            if not exhausted:
                records, _ = await self._paginator.list_page(
                    schema.table,
                    page_size=limit,
                    fields=field_list,
                    formula=formula,
                    sort=sort_spec,
                    cursor=cursor,
                )

        data = self._mapper.normalize_many(records, schema)
        return FindManyResponse(
            limit=limit,
            offset=offset,
            total=total,
            pagination=self._pagination.build(limit, offset, total, len(data)),
            data=data,
        )

    async def find_total_records(
        self, schema: DataSourceSchema, where: Sequence[Where] = ()
    ) -> int:
        formula = self._formula.where_to_filter(where, schema)
        return await self._paginator.count(schema.table, formula=formula)

    # ── Writes ───────────────────────────────────────────────────────

    async def create_one(
        self, schema: DataSourceSchema, data: dict[str, Any]
    ) -> dict[str, Any]:
        data = await self._relations.validate(schema, data)
        fields = self._mapper.to_fields(data, schema)
        logger.debug("[airtable] Create record in %s", schema.table)

        response = await self._connection.request(
            "POST",
            self._path(schema.table),
            json={"records": [{"fields": fields}]},
        )
        records = response.get("records") or []
        if not records:
            raise CreateFailedError(f"Failed to create record in {schema.table!r}")
        return self._mapper.normalize(records[0], schema)

    async def update_one(
        self, schema: DataSourceSchema, record_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        data = {k: v for k, v in data.items() if k != schema.primary_key}
        data = await self._relations.validate(schema, data)
        fields = self._mapper.to_fields(data, schema)
        logger.debug("[airtable] Update %s record %s", schema.table, record_id)

        try:
            response = await self._connection.request(
                "PATCH",
                self._path(schema.table, record_id),
                json={"fields": fields},
            )
        except DataSourceRequestError as e:
            if e.is_not_found:
                raise RecordNotFoundError(schema.table, record_id, e.message) from e
            raise
        if not response.get("id"):
            raise UpdateFailedError(
                f"Failed to update record {record_id!r} in {schema.table!r}"
            )
        return self._mapper.normalize(response, schema)

    async def delete_one(
        self,
        schema: DataSourceSchema,
        record_id: str,
        soft_delete: str | None = None,
    ) -> DeleteResponse:
        """Delete a record, or stamp ``soft_delete`` with the current UTC time.

        A hard delete of an id the backend does not know reports
        ``deleted=0``.
        """
        if soft_delete:
            stamp = datetime.now(timezone.utc).strftime(SOFT_DELETE_FORMAT)
            await self.update_one(schema, record_id, {soft_delete: stamp})
            return DeleteResponse(deleted=1)

        logger.debug("[airtable] Delete %s record %s", schema.table, record_id)
        try:
            response = await self._connection.request(
                "DELETE", self._path(schema.table, record_id)
            )
        except DataSourceRequestError as e:
            if e.is_not_found:
                logger.debug("[airtable] %s record %s already gone", schema.table, record_id)
                return DeleteResponse(deleted=0)
            raise
        if not response.get("id"):
            raise DeleteFailedError(
                f"Failed to delete record {record_id!r} in {schema.table!r}"
            )
        return DeleteResponse(deleted=1)

    # ── Table management ─────────────────────────────────────────────

    async def create_table(self, schema: DataSourceSchema) -> bool:
        """Create ``schema.table`` if it does not exist.

        Returns False instead of raising when the backend refuses; callers
        decide whether a missing table is fatal.
        """
        try:
            if schema.table in await self.list_tables():
                logger.debug("[airtable] Table %s already exists", schema.table)
                return True

            specs: list[dict[str, Any]] = []
            for column in schema.columns:
                # Airtable assigns its own record id.
                if column.primary_key:
                    column = column.model_copy(
                        update={"field": f"{schema.table}Id", "primary_key": False}
                    )
                specs.append(self._mapper.to_field_spec(column, self._config.timezone))

            try:
                response = await self._connection.request(
                    "POST",
                    f"/meta/bases/{self._connection.base_id}/tables",
                    json={"name": schema.table, "fields": specs},
                )
            except DataSourceRequestError as e:
                raise TableCreateFailedError(
                    f"Failed to create table {schema.table!r}: {e.message}"
                ) from e
            if not response.get("id"):
                raise TableCreateFailedError(
                    f"Failed to create table {schema.table!r}: no table id returned"
                )
            logger.debug("[airtable] Created table %s", schema.table)
            return True
        except DataGateError as e:
            logger.warning("[airtable] Error creating table - %s", e)
            return False

    async def truncate(self, table: str) -> None:
        """Delete every record of ``table``, ten at a time.

        Best effort: errors are logged and stop the loop, so a partial
        truncation is possible.
        """
        try:
            schema = await self.get_schema(table)
            while True:
                records, _ = await self._paginator.list_page(
                    schema.table, page_size=TRUNCATE_PAGE_SIZE, fields=[]
                )
                if not records:
                    break
                for record in records:
                    await self._connection.request(
                        "DELETE", self._path(schema.table, record["id"])
                    )
            logger.debug("[airtable] Truncated %s", table)
        except DataGateError as e:
            logger.warning("[airtable] Error truncating table %s - %s", table, e)

    async def unique_check(
        self, schema: DataSourceSchema, data: dict[str, Any]
    ) -> IsUniqueResponse:
        # Airtable has no uniqueness constraints to check against.
        return IsUniqueResponse(valid=True)
