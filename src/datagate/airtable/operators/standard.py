"""Standard comparison operators for Airtable formula compilation."""

from __future__ import annotations

from typing import Any

from ...query import WhereOperator

_FORMULA_OP_MAP: dict[WhereOperator, str] = {
    WhereOperator.EQUALS: "=",
    WhereOperator.NOT_EQUALS: "!=",
    WhereOperator.GT: ">",
    WhereOperator.GTE: ">=",
    WhereOperator.LT: "<",
    WhereOperator.LTE: "<=",
}


def quote(value: Any) -> str:
    """Render a value as a double-quoted formula string literal."""
    if value is None:
        text = ""
    elif isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    text = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{text}"'


def compile_standard(field: str, op: WhereOperator | str, val: Any) -> str | None:
    """Compile comparison operators to ``{field}<op>"value"``."""
    try:
        where_op = WhereOperator(op)
    except ValueError:
        return None
    symbol = _FORMULA_OP_MAP.get(where_op)
    if symbol is None:
        return None
    return f"{field}{symbol}{quote(val)}"
