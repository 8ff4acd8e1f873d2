"""Set membership -> OR()/AND() of equality terms."""

from __future__ import annotations

from typing import Any

from ...exceptions import UnsupportedOperatorError
from ...query import WhereOperator
from .standard import quote


def _members(op: WhereOperator, val: Any) -> list[Any]:
    if isinstance(val, (list, tuple, set, frozenset)):
        return list(val)
    if isinstance(val, str) and "," in val:
        return [v.strip() for v in val.split(",")]
    if val is None:
        raise UnsupportedOperatorError(op.value, "requires a list of values")
    return [val]


def compile_set(field: str, op: WhereOperator | str, val: Any) -> str | None:
    """Compile in / not_in. An empty ``in`` matches nothing, an empty ``not_in`` everything."""
    try:
        where_op = WhereOperator(op)
    except ValueError:
        return None
    if where_op == WhereOperator.IN:
        members = _members(where_op, val)
        if not members:
            return "FALSE()"
        terms = [f"{field}={quote(v)}" for v in members]
        return terms[0] if len(terms) == 1 else f"OR({','.join(terms)})"
    if where_op == WhereOperator.NOT_IN:
        members = _members(where_op, val)
        if not members:
            return "TRUE()"
        terms = [f"{field}!={quote(v)}" for v in members]
        return terms[0] if len(terms) == 1 else f"AND({','.join(terms)})"
    return None
