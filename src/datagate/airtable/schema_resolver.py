"""Derive canonical schemas from the Airtable metadata catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..correlation import get_logger
from ..exceptions import TableNotFoundError
from ..schema import Column, ColumnType, DataSourceSchema, Relation
from .field_types import AirtableFieldType, to_column_type

if TYPE_CHECKING:
    from .connection import AirtableConnectionManager

logger = get_logger(__name__)

PRIMARY_KEY = "id"

_LINK = AirtableFieldType.MULTIPLE_RECORD_LINKS.value


def _linked_table_id(field: dict[str, Any]) -> str | None:
    if field.get("type") != _LINK:
        return None
    return (field.get("options") or {}).get("linkedTableId")


def _choices(field: dict[str, Any]) -> list[str] | None:
    choices = (field.get("options") or {}).get("choices")
    if not choices:
        return None
    return [c["name"] for c in choices if "name" in c]


def build_schema(table_name: str, tables: list[dict[str, Any]]) -> DataSourceSchema:
    """Build the canonical schema of ``table_name`` from the full table catalog.

    Airtable has no primary key column, so an ``id`` column standing for
    the record id is synthesized first. Reverse relations are found with a
    second pass over every field of every table, because the catalog has
    no inverse-link metadata; this is O(tables x fields) per call.

    Raises:
        TableNotFoundError: ``table_name`` is not in the catalog.
    """
    target = next((t for t in tables if t.get("name") == table_name), None)
    if target is None:
        raise TableNotFoundError(table_name)

    by_id = {t.get("id"): t for t in tables}

    columns: list[Column] = [
        Column(
            field=PRIMARY_KEY,
            type=ColumnType.STRING,
            nullable=False,
            required=False,
            primary_key=True,
            unique_key=True,
            foreign_key=False,
            default=None,
            extra={"note": "Airtable autogenerated record id"},
        )
    ]
    relations: list[Relation] = []

    for field in target.get("fields", []):
        linked_id = _linked_table_id(field)
        if linked_id is not None:
            linked = by_id.get(linked_id)
            if linked is None:
                logger.warning(
                    "[airtable] %s.%s links to unknown table %s; relation skipped",
                    table_name,
                    field.get("name"),
                    linked_id,
                )
            else:
                relations.append(
                    Relation(
                        table=linked["name"],
                        column=PRIMARY_KEY,
                        org_table=table_name,
                        org_column=field["name"],
                    )
                )

        column_type = to_column_type(field.get("type", ""))
        columns.append(
            Column(
                field=field["name"],
                type=column_type,
                nullable=True,
                required=False,
                primary_key=False,
                unique_key=False,
                foreign_key=field.get("type") == _LINK,
                default=None,
                enums=_choices(field) if column_type == ColumnType.ENUM else None,
                extra=field,
            )
        )

    # Reverse relations: fields elsewhere that link back to this table.
    for table in tables:
        for field in table.get("fields", []):
            if _linked_table_id(field) == target.get("id"):
                relations.append(
                    Relation(
                        table=table["name"],
                        column=field["name"],
                        org_table=table_name,
                        org_column=PRIMARY_KEY,
                    )
                )

    return DataSourceSchema(
        table=table_name,
        primary_key=PRIMARY_KEY,
        columns=columns,
        relations=relations,
    )


class AirtableSchemaResolver:
    """Fetches the table catalog of a base and resolves schemas from it."""

    def __init__(self, connection: AirtableConnectionManager) -> None:
        self._connection = connection

    async def fetch_tables(self) -> list[dict[str, Any]]:
        """Return the raw table catalog of the base."""
        response = await self._connection.request(
            "GET", f"/meta/bases/{self._connection.base_id}/tables"
        )
        return list(response.get("tables") or [])

    async def list_tables(self) -> list[str]:
        logger.debug("[airtable] List tables")
        tables = [t["name"] for t in await self.fetch_tables()]
        logger.debug("[airtable] Tables: %s", ",".join(tables))
        return tables

    async def get_schema(self, table: str) -> DataSourceSchema:
        logger.debug("[airtable] Get schema for table %s", table)
        try:
            return build_schema(table, await self.fetch_tables())
        except TableNotFoundError as e:
            logger.warning("[airtable] Error getting schema - %s", e)
            raise
