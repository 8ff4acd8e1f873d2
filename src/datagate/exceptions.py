"""Exceptions raised by the datagate query layer."""

from __future__ import annotations


class DataGateError(Exception):
    """Root exception for the entire datagate package."""


class ConfigurationError(DataGateError):
    """Raised when data source configuration is missing or malformed."""


# ── Lookup errors ────────────────────────────────────────────────────


class NotFoundError(DataGateError):
    """Base class for missing tables and records."""


class TableNotFoundError(NotFoundError):
    """Raised when a table is absent from the backend's metadata catalog."""

    def __init__(self, table: str) -> None:
        self.table = table
        super().__init__(f"Table {table!r} not found")


class RecordNotFoundError(NotFoundError):
    """Raised when a record cannot be found by its primary key."""

    def __init__(self, table: str, record_id: object, reason: str | None = None) -> None:
        self.table = table
        self.record_id = record_id
        msg = f"Record {record_id!r} not found in {table!r}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


class LinkedRecordNotFoundError(NotFoundError):
    """Raised when a link field references a record that does not resolve."""

    def __init__(self, table: str, column: str, record_id: object) -> None:
        self.table = table
        self.column = column
        self.record_id = record_id
        super().__init__(
            f"Linked record {record_id!r} for {column!r} not found in {table!r}"
        )


# ── Write errors ─────────────────────────────────────────────────────


class WriteError(DataGateError):
    """Base class for mutations the backend did not acknowledge."""


class CreateFailedError(WriteError):
    """Raised when the backend echoes back no created record."""


class UpdateFailedError(WriteError):
    """Raised when the backend echoes back no updated record id."""


class DeleteFailedError(WriteError):
    """Raised when a hard delete is answered without a record id."""


class TableCreateFailedError(WriteError):
    """Raised when the backend rejects a table definition."""


# ── Query translation errors ─────────────────────────────────────────


class QueryTranslationError(DataGateError):
    """Raised when a predicate cannot be rendered for the backend."""


class UnsupportedOperatorError(QueryTranslationError):
    """Raised by operator compilers for operators or operands they cannot render.

    The formula builder catches this, logs it and drops the predicate.
    """

    def __init__(self, operator: object, reason: str | None = None) -> None:
        self.operator = operator
        msg = f"Operator not supported: {operator}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class UnknownColumnError(QueryTranslationError):
    """Raised when a predicate references a column the schema does not have."""

    def __init__(self, table: str, column: str) -> None:
        self.table = table
        self.column = column
        super().__init__(f"Column {column!r} does not exist on {table!r}")


class InvalidPageTokenError(DataGateError):
    """Raised when a page token cannot be decoded."""


# ── Infrastructure errors ────────────────────────────────────────────


class DataSourceError(DataGateError):
    """Base class for backend communication failures."""


class DataSourceConnectionError(DataSourceError):
    """Raised when the backend cannot be reached."""


class DataSourceRequestError(DataSourceError):
    """Raised when the backend answers with an error status.

    Carries the backend's own error message so callers see the original cause.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        prefix = f"HTTP {status_code}" if status_code is not None else "Request failed"
        super().__init__(f"{prefix}: {message}")

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404
