"""datagate — backend-agnostic query layer over hosted table stores.

Schemas, predicates and paging are expressed once; adapters translate them
for each backend (Airtable today).
"""

from __future__ import annotations

from .airtable import AirtableDataSource
from .config import DataSourceConfig
from .correlation import (
    correlation_scope,
    generate_correlation_id,
    get_correlation_id,
    get_logger,
    set_correlation_id,
)

# ── Errors ───────────────────────────────────────────────────────
from .exceptions import (
    ConfigurationError,
    CreateFailedError,
    DataGateError,
    DataSourceConnectionError,
    DataSourceError,
    DataSourceRequestError,
    DeleteFailedError,
    InvalidPageTokenError,
    LinkedRecordNotFoundError,
    NotFoundError,
    QueryTranslationError,
    RecordNotFoundError,
    TableCreateFailedError,
    TableNotFoundError,
    UnknownColumnError,
    UnsupportedOperatorError,
    UpdateFailedError,
    WriteError,
)
from .factory import create_datasource
from .pagination import PageRequest, Pagination

# ── Ports ────────────────────────────────────────────────────────
from .ports import DataSourceType, ICacheService, IDataSource
from .query import Sort, SortDirection, Where, WhereOperator
from .responses import (
    DeleteResponse,
    FindManyResponse,
    FindOneResponseObject,
    IsUniqueResponse,
    PageLinks,
    PaginationBlock,
)
from .schema import Column, ColumnType, DataSourceSchema, Relation
from .schema_cache import CachedSchemaProvider

__all__ = [
    "AirtableDataSource",
    "CachedSchemaProvider",
    "Column",
    "ColumnType",
    "ConfigurationError",
    "CreateFailedError",
    "DataGateError",
    "DataSourceConfig",
    "DataSourceConnectionError",
    "DataSourceError",
    "DataSourceRequestError",
    "DataSourceSchema",
    "DataSourceType",
    "DeleteFailedError",
    "DeleteResponse",
    "FindManyResponse",
    "FindOneResponseObject",
    "ICacheService",
    "IDataSource",
    "InvalidPageTokenError",
    "IsUniqueResponse",
    "LinkedRecordNotFoundError",
    "NotFoundError",
    "PageLinks",
    "PageRequest",
    "Pagination",
    "PaginationBlock",
    "QueryTranslationError",
    "RecordNotFoundError",
    "Relation",
    "Sort",
    "SortDirection",
    "TableCreateFailedError",
    "TableNotFoundError",
    "UnknownColumnError",
    "UnsupportedOperatorError",
    "UpdateFailedError",
    "Where",
    "WhereOperator",
    "WriteError",
    "correlation_scope",
    "create_datasource",
    "generate_correlation_id",
    "get_correlation_id",
    "get_logger",
    "set_correlation_id",
]
