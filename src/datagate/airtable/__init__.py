"""Airtable backend: schema resolution, formula filters and cursor paging."""

from __future__ import annotations

from .connection import AirtableConnectionManager
from .datasource import AirtableDataSource
from .field_types import AirtableFieldType, to_column_type, to_native_type
from .formula_builder import AirtableFormulaBuilder
from .paginator import PAGE_SIZE_LIMIT, AirtablePaginator
from .record_mapper import AirtableRecordMapper
from .relations import LinkedRecordValidator
from .schema_resolver import AirtableSchemaResolver, build_schema

__all__ = [
    "PAGE_SIZE_LIMIT",
    "AirtableConnectionManager",
    "AirtableDataSource",
    "AirtableFieldType",
    "AirtableFormulaBuilder",
    "AirtablePaginator",
    "AirtableRecordMapper",
    "AirtableSchemaResolver",
    "LinkedRecordValidator",
    "build_schema",
    "to_column_type",
    "to_native_type",
]
