"""Canonical, backend-agnostic table schema."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class ColumnType(str, Enum):
    """Normalized column types every backend type collapses into."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ENUM = "enum"
    JSON = "json"
    UNKNOWN = "unknown"


class Column(BaseModel):
    """A single column of a canonical schema."""

    field: str
    type: ColumnType
    nullable: bool = True
    required: bool = False
    primary_key: bool = False
    unique_key: bool = False
    foreign_key: bool = False
    default: Any = None
    enums: list[str] | None = None
    extra: dict[str, Any] = Field(default_factory=dict)


class Relation(BaseModel):
    """Directed edge: ``org_table.org_column`` relates to ``table.column``.

    ``org_table`` is always the table owning the schema. Forward relations
    point from a link field to the linked table's primary key; reverse
    relations point from the primary key to another table's link field.
    """

    table: str
    column: str
    org_table: str
    org_column: str


class DataSourceSchema(BaseModel):
    """Table metadata: columns, primary key and relations."""

    table: str
    primary_key: str
    columns: list[Column]
    relations: list[Relation] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_primary_key(self) -> DataSourceSchema:
        keys = [c.field for c in self.columns if c.primary_key]
        if len(keys) != 1:
            raise ValueError(
                f"Schema {self.table!r} must have exactly one primary key column, "
                f"found {len(keys)}"
            )
        if keys[0] != self.primary_key:
            raise ValueError(
                f"Schema {self.table!r} primary_key {self.primary_key!r} does not "
                f"match primary key column {keys[0]!r}"
            )
        return self

    def column(self, name: str) -> Column | None:
        """Return the column called ``name``, or ``None``."""
        for column in self.columns:
            if column.field == name:
                return column
        return None

    def relation_for(self, column: str) -> Relation | None:
        """Return the forward relation backing link column ``column``."""
        for relation in self.relations:
            if relation.org_table == self.table and relation.org_column == column:
                return relation
        return None

    @property
    def field_names(self) -> list[str]:
        """Names of all non primary key columns, in schema order."""
        return [c.field for c in self.columns if not c.primary_key]
