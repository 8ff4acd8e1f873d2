"""Airtable record <-> canonical record mapping."""

from __future__ import annotations

import os
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any

from ..correlation import get_logger
from ..schema import ColumnType
from .field_types import AirtableFieldType, to_native_type

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from ..schema import Column, DataSourceSchema

logger = get_logger(__name__)

DATE_FORMAT = {"format": "YYYY-MM-DD", "name": "iso"}
TIME_FORMAT = {"format": "HH:mm", "name": "24hour"}
CHECKBOX_OPTIONS = {"icon": "check", "color": "grayBright"}


def _to_datetime(value: Any) -> datetime:
    """Parse a backend date value; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        # Epoch milliseconds
        parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise TypeError(f"Unsupported date value {value!r}")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_iso(value: Any) -> str:
    """Render a date value as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    parsed = _to_datetime(value)
    return f"{parsed.strftime('%Y-%m-%dT%H:%M:%S')}.{parsed.microsecond // 1000:03d}Z"


def detect_timezone(override: str | None = None) -> str:
    """Timezone name for new date fields.

    Airtable accepts IANA names, ``"utc"`` or ``"client"``. Abbreviations
    such as ``CET`` are not accepted and fall back to ``"client"``.
    """
    name = override or os.environ.get("TZ") or datetime.now().astimezone().tzname()
    if not name:
        return "client"
    name = name.lstrip(":")
    if name.upper() in ("UTC", "GMT", "ETC/UTC", "Z"):
        return "utc"
    if "/" in name and not name.startswith("/"):
        return name
    return "client"


class AirtableRecordMapper:
    """
    Map native ``{"id": ..., "fields": {...}}`` records to flat dicts.

    The primary key column takes the record id. Every field value goes
    through :meth:`format_field`; only DATE values are transformed.
    """

    def normalize(
        self,
        record: dict[str, Any],
        schema: DataSourceSchema,
        fields: Sequence[str] | None = None,
    ) -> dict[str, Any]:
        """Flatten one native record.

        When ``fields`` is given, keys outside it are dropped (the primary
        key is always kept). Single-record fetches cannot select fields on
        the backend, so the filtering happens here.
        """
        result: dict[str, Any] = {schema.primary_key: record.get("id")}
        allowed = set(fields) if fields else None
        for name, value in (record.get("fields") or {}).items():
            if allowed is not None and name not in allowed:
                continue
            column = schema.column(name)
            column_type = column.type if column is not None else ColumnType.UNKNOWN
            result[name] = self.format_field(column_type, value)
        return result

    def normalize_many(
        self,
        records: Iterable[dict[str, Any]],
        schema: DataSourceSchema,
        fields: Sequence[str] | None = None,
    ) -> list[dict[str, Any]]:
        return [self.normalize(r, schema, fields) for r in records]

    @staticmethod
    def format_field(column_type: ColumnType, value: Any) -> Any:
        if value is None:
            return None
        if column_type == ColumnType.DATE:
            try:
                return to_iso(value)
            except (TypeError, ValueError, OverflowError) as e:
                logger.warning("[airtable] Unparseable date %r left as-is: %s", value, e)
                return value
        return value

    def to_fields(
        self, data: dict[str, Any], schema: DataSourceSchema
    ) -> dict[str, Any]:
        """Build the native ``fields`` payload; the primary key is never written."""
        fields: dict[str, Any] = {}
        for name, value in data.items():
            if name == schema.primary_key:
                continue
            if isinstance(value, (date, datetime)):
                value = to_iso(value)
            fields[name] = value
        return fields

    def to_field_spec(
        self, column: Column, timezone_name: str | None = None
    ) -> dict[str, Any]:
        """Native field definition for table creation."""
        native = to_native_type(column.type)
        spec: dict[str, Any] = {"name": column.field, "type": native.value}

        if native == AirtableFieldType.NUMBER:
            spec["options"] = {"precision": int(column.extra.get("decimal", 0) or 0)}
        elif native == AirtableFieldType.SINGLE_SELECT:
            spec["options"] = {"choices": [{"name": c} for c in column.enums or []]}
        elif native == AirtableFieldType.CHECKBOX:
            spec["options"] = dict(CHECKBOX_OPTIONS)
        elif native == AirtableFieldType.DATE_TIME:
            spec["options"] = {
                "timeZone": detect_timezone(timezone_name),
                "dateFormat": dict(DATE_FORMAT),
                "timeFormat": dict(TIME_FORMAT),
            }
        return spec
