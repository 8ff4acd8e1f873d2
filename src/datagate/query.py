"""Backend-agnostic predicates and ordering."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterable


class WhereOperator(str, Enum):
    """Operators a where predicate may use.

    Not every backend can render every operator; unsupported ones are
    dropped by the translator with a warning.
    """

    # Standard comparison
    EQUALS = "="
    NOT_EQUALS = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="

    # String operations
    LIKE = "like"
    NOT_LIKE = "not_like"
    SEARCH = "search"

    # Set membership
    IN = "in"
    NOT_IN = "not_in"

    # Null checks
    NULL = "is_null"
    NOT_NULL = "is_not_null"


@dataclass(frozen=True)
class Where:
    """A single ``column <operator> value`` predicate.

    ``operator`` is usually a :class:`WhereOperator`; a raw string that is not
    a known operator is kept as-is so the translator can report and skip it.
    """

    column: str
    operator: WhereOperator | str
    value: Any = None

    def __post_init__(self) -> None:
        if isinstance(self.operator, str) and not isinstance(
            self.operator, WhereOperator
        ):
            try:
                object.__setattr__(self, "operator", WhereOperator(self.operator))
            except ValueError:
                pass


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Sort:
    """Order results by ``column``."""

    column: str
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def parse(cls, order_by: Iterable[str]) -> list[Sort]:
        """Parse ``["-created", "name"]`` style ordering (``-`` = descending)."""
        result: list[Sort] = []
        for item in order_by:
            if item.startswith("-"):
                result.append(cls(item[1:], SortDirection.DESC))
            else:
                result.append(cls(item, SortDirection.ASC))
        return result
