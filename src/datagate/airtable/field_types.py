"""Airtable native field types and their canonical projection."""

from __future__ import annotations

from enum import Enum

from ..schema import ColumnType


class AirtableFieldType(str, Enum):
    """Field types reported by the Airtable metadata API."""

    AI_TEXT = "aiText"
    AUTO_NUMBER = "autoNumber"
    BARCODE = "barcode"
    BUTTON = "button"
    CHECKBOX = "checkbox"
    COUNT = "count"
    CREATED_BY = "createdBy"
    CREATED_TIME = "createdTime"
    CURRENCY = "currency"
    DATE = "date"
    DATE_TIME = "dateTime"
    DURATION = "duration"
    EMAIL = "email"
    EXTERNAL_SYNC_SOURCE = "externalSyncSource"
    FORMULA = "formula"
    LAST_MODIFIED_BY = "lastModifiedBy"
    LAST_MODIFIED_TIME = "lastModifiedTime"
    MULTILINE_TEXT = "multilineText"
    MULTIPLE_ATTACHMENTS = "multipleAttachments"
    MULTIPLE_COLLABORATORS = "multipleCollaborators"
    MULTIPLE_LOOKUP_VALUES = "multipleLookupValues"
    MULTIPLE_RECORD_LINKS = "multipleRecordLinks"
    MULTIPLE_SELECTS = "multipleSelects"
    NUMBER = "number"
    PERCENT = "percent"
    PHONE_NUMBER = "phoneNumber"
    RATING = "rating"
    RICH_TEXT = "richText"
    ROLLUP = "rollup"
    SINGLE_COLLABORATOR = "singleCollaborator"
    SINGLE_LINE_TEXT = "singleLineText"
    SINGLE_SELECT = "singleSelect"
    URL = "url"


_F = AirtableFieldType

# Many native types collapse into one canonical type.
FIELD_TYPE_MAP: dict[AirtableFieldType, ColumnType] = {
    _F.EMAIL: ColumnType.STRING,
    _F.URL: ColumnType.STRING,
    _F.BARCODE: ColumnType.STRING,
    _F.MULTILINE_TEXT: ColumnType.STRING,
    _F.RICH_TEXT: ColumnType.STRING,
    _F.DURATION: ColumnType.STRING,
    _F.PHONE_NUMBER: ColumnType.STRING,
    _F.SINGLE_LINE_TEXT: ColumnType.STRING,
    _F.AUTO_NUMBER: ColumnType.NUMBER,
    _F.NUMBER: ColumnType.NUMBER,
    _F.COUNT: ColumnType.NUMBER,
    _F.PERCENT: ColumnType.NUMBER,
    _F.CURRENCY: ColumnType.NUMBER,
    _F.RATING: ColumnType.NUMBER,
    _F.CHECKBOX: ColumnType.BOOLEAN,
    _F.DATE: ColumnType.DATE,
    _F.DATE_TIME: ColumnType.DATE,
    _F.CREATED_TIME: ColumnType.DATE,
    _F.LAST_MODIFIED_TIME: ColumnType.DATE,
    _F.MULTIPLE_ATTACHMENTS: ColumnType.JSON,
    _F.MULTIPLE_COLLABORATORS: ColumnType.JSON,
    _F.MULTIPLE_RECORD_LINKS: ColumnType.JSON,
    _F.MULTIPLE_LOOKUP_VALUES: ColumnType.JSON,
    _F.MULTIPLE_SELECTS: ColumnType.JSON,
    _F.SINGLE_COLLABORATOR: ColumnType.JSON,
    _F.FORMULA: ColumnType.JSON,
    _F.ROLLUP: ColumnType.JSON,
    _F.CREATED_BY: ColumnType.JSON,
    _F.LAST_MODIFIED_BY: ColumnType.JSON,
    _F.BUTTON: ColumnType.JSON,
    _F.EXTERNAL_SYNC_SOURCE: ColumnType.JSON,
    _F.AI_TEXT: ColumnType.JSON,
    _F.SINGLE_SELECT: ColumnType.ENUM,
}

# Native type used when creating a field for a canonical type.
NATIVE_TYPE_MAP: dict[ColumnType, AirtableFieldType] = {
    ColumnType.STRING: _F.SINGLE_LINE_TEXT,
    ColumnType.NUMBER: _F.NUMBER,
    ColumnType.BOOLEAN: _F.CHECKBOX,
    ColumnType.DATE: _F.DATE_TIME,
    ColumnType.JSON: _F.MULTILINE_TEXT,
    ColumnType.ENUM: _F.SINGLE_SELECT,
}


def to_column_type(native_type: str) -> ColumnType:
    """Map a native field type to its canonical type; unknown types map to UNKNOWN."""
    try:
        return FIELD_TYPE_MAP.get(AirtableFieldType(native_type), ColumnType.UNKNOWN)
    except ValueError:
        return ColumnType.UNKNOWN


def to_native_type(column_type: ColumnType) -> AirtableFieldType:
    """Map a canonical type to the native type used for new fields."""
    return NATIVE_TYPE_MAP.get(column_type, _F.MULTILINE_TEXT)
