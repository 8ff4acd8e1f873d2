"""Null checks -> BLANK() comparisons."""

from __future__ import annotations

from typing import Any

from ...query import WhereOperator


def compile_null(field: str, op: WhereOperator | str, val: Any) -> str | None:  # noqa: ARG001
    """Compile is_null / is_not_null. The value is ignored."""
    try:
        where_op = WhereOperator(op)
    except ValueError:
        return None
    if where_op == WhereOperator.NULL:
        return f"{field}=BLANK()"
    if where_op == WhereOperator.NOT_NULL:
        return f"NOT({field}=BLANK())"
    return None
