"""Cursor paging over ``listRecords``: numeric offsets and exhaustive counts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from ..correlation import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .connection import AirtableConnectionManager

logger = get_logger(__name__)

# Largest pageSize Airtable accepts.
PAGE_SIZE_LIMIT = 100


def path_segment(value: str) -> str:
    """Escape ``value`` as exactly one URL path segment."""
    segment = quote(str(value), safe="")
    # "." and ".." would otherwise be collapsed by URL normalization.
    if segment and not segment.strip("."):
        segment = segment.replace(".", "%2E")
    return segment


def table_path(base_id: str, table: str) -> str:
    return f"/{base_id}/{path_segment(table)}"


class AirtablePaginator:
    """
    Translate ``(limit, offset)`` into Airtable's continuation cursors.

    Airtable has no numeric offset: each ``listRecords`` page returns an
    opaque ``offset`` cursor for the next one, and its absence marks the
    last page. Reaching offset ``n`` means reading ``n`` records first; the
    seek pages request no fields so only record ids travel.
    """

    def __init__(self, connection: AirtableConnectionManager) -> None:
        self._connection = connection

    async def list_page(
        self,
        table: str,
        *,
        page_size: int,
        fields: Sequence[str] | None = None,
        formula: str = "",
        sort: Sequence[dict[str, str]] | None = None,
        cursor: str | None = None,
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Fetch one page; return ``(records, next_cursor)``."""
        body: dict[str, Any] = {"pageSize": min(page_size, PAGE_SIZE_LIMIT)}
        # An explicit empty list asks for ids only.
        if fields is not None:
            body["fields"] = list(fields)
        if formula:
            body["filterByFormula"] = formula
        if sort:
            body["sort"] = list(sort)
        if cursor:
            body["offset"] = cursor

        response = await self._connection.request(
            "POST",
            f"{table_path(self._connection.base_id, table)}/listRecords",
            json=body,
        )
        return list(response.get("records") or []), response.get("offset")

    async def seek(
        self,
        table: str,
        offset: int,
        *,
        formula: str = "",
        sort: Sequence[dict[str, str]] | None = None,
    ) -> tuple[str | None, bool]:
        """Advance a cursor past the first ``offset`` matching records.

        Returns ``(cursor, exhausted)``. ``exhausted`` is True when the
        result set ended before ``offset`` was reached, in which case the
        page at ``offset`` is empty. The formula and sort of the real
        fetch must be passed so both walk the same ordering.
        """
        cursor: str | None = None
        remaining = offset
        while remaining > 0:
            page_size = min(PAGE_SIZE_LIMIT, remaining)
            records, cursor = await self.list_page(
                table,
                page_size=page_size,
                fields=[],
                formula=formula,
                sort=sort,
                cursor=cursor,
            )
            remaining -= len(records)
            if cursor is None:
                return None, True
        logger.debug("[airtable] Seeked %s records into %s", offset, table)
        return cursor, False

    async def count(self, table: str, *, formula: str = "") -> int:
        """Count matching records by paging through all of them.

        O(n) in the size of the result set: one request per 100 records.
        """
        total = 0
        cursor: str | None = None
        while True:
            records, cursor = await self.list_page(
                table,
                page_size=PAGE_SIZE_LIMIT,
                fields=[],
                formula=formula,
                cursor=cursor,
            )
            total += len(records)
            if cursor is None or len(records) < PAGE_SIZE_LIMIT:
                break
        logger.debug("[airtable] %s has %s matching records", table, total)
        return total
