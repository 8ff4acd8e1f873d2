"""String operators -> SEARCH() substring matching."""

from __future__ import annotations

from typing import Any

from ...exceptions import UnsupportedOperatorError
from ...query import WhereOperator
from .standard import quote


def _needle(op: WhereOperator, val: Any) -> str:
    if val is None or isinstance(val, (list, tuple, dict)):
        raise UnsupportedOperatorError(op.value, "requires a scalar value")
    # SQL style wildcards around the needle mean nothing to SEARCH().
    return str(val).strip("%")


def compile_string(field: str, op: WhereOperator | str, val: Any) -> str | None:
    """Compile like/search/not_like. Returns None if not a string op."""
    try:
        where_op = WhereOperator(op)
    except ValueError:
        return None
    if where_op in (WhereOperator.LIKE, WhereOperator.SEARCH):
        return f"SEARCH({quote(_needle(where_op, val))},{field})"
    if where_op == WhereOperator.NOT_LIKE:
        return f"NOT(SEARCH({quote(_needle(where_op, val))},{field}))"
    return None
