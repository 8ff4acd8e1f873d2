"""Airtable formula builder — where predicates to ``filterByFormula``."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..correlation import get_logger
from ..exceptions import UnknownColumnError, UnsupportedOperatorError
from ..query import SortDirection, WhereOperator
from ..schema import ColumnType
from .operators import compile_null, compile_set, compile_standard, compile_string

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..query import Sort, Where
    from ..schema import Column, DataSourceSchema

logger = get_logger(__name__)

_COMPILERS = [
    compile_standard,
    compile_string,
    compile_null,
    compile_set,
]


def _field_ref(column: Column) -> str:
    # The synthesized primary key is the record id, not a stored field.
    if column.primary_key:
        return "RECORD_ID()"
    return "{" + column.field + "}"


def _compile_leaf(field: str, op: WhereOperator | str, val: Any) -> str:
    """Compile one predicate; raises UnsupportedOperatorError if nothing renders it."""
    for compiler in _COMPILERS:
        result = compiler(field, op, val)
        if result is not None:
            return result
    raise UnsupportedOperatorError(getattr(op, "value", op))


class AirtableFormulaBuilder:
    """Compiles where predicates, sorting and field lists for list requests."""

    def where_to_filter(
        self, where: Sequence[Where] | None, schema: DataSourceSchema
    ) -> str:
        """Render predicates as one ``filterByFormula`` expression.

        An empty list renders as ``""`` (no filter). A single term is
        returned bare; two or more are wrapped in ``AND(...)``. Predicates
        the backend cannot express are logged and dropped.

        Raises:
            UnknownColumnError: a predicate names a column not in ``schema``.
        """
        if not where:
            return ""

        terms: list[str] = []
        for predicate in where:
            column = schema.column(predicate.column)
            if column is None:
                raise UnknownColumnError(schema.table, predicate.column)

            value = predicate.value
            # Checkbox fields have no false literal; unchecked reads as blank.
            if column.type == ColumnType.BOOLEAN and value is False:
                value = ""

            try:
                terms.append(_compile_leaf(_field_ref(column), predicate.operator, value))
            except UnsupportedOperatorError as e:
                logger.warning(
                    "[airtable] %s on %s.%s - predicate dropped",
                    e,
                    schema.table,
                    predicate.column,
                )

        if not terms:
            return ""
        if len(terms) == 1:
            return terms[0]
        return f"AND({','.join(terms)})"

    def build_sort(self, sort: Sequence[Sort] | None) -> list[dict[str, str]]:
        """Build the ``sort`` list: ``[{"field": ..., "direction": "asc"|"desc"}]``."""
        if not sort:
            return []
        return [
            {
                "field": s.column,
                "direction": SortDirection(s.direction).value,
            }
            for s in sort
        ]

    def build_fields(
        self, schema: DataSourceSchema, fields: Sequence[str] | None
    ) -> list[str]:
        """Fields to request: the caller's selection, or every stored column.

        The primary key is never a stored field, so it is always left out.
        """
        if fields:
            return [f for f in fields if f != schema.primary_key]
        return schema.field_names

    @staticmethod
    def is_primary_key_lookup(
        where: Sequence[Where] | None, schema: DataSourceSchema
    ) -> bool:
        """True for exactly one ``equals`` predicate on the primary key."""
        if not where or len(where) != 1:
            return False
        only = where[0]
        return only.column == schema.primary_key and only.operator == WhereOperator.EQUALS
