"""Correlation ID management — every log line and backend call carries one."""

from __future__ import annotations

import contextlib
import logging
import uuid
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator, MutableMapping

# ContextVar so concurrent requests keep their own id across awaits.
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def get_correlation_id() -> str | None:
    """Get current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Set correlation ID in context."""
    _correlation_id.set(correlation_id)


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


@contextlib.contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Run a block under ``correlation_id`` (generated when omitted).

    The previous value is restored on exit.
    """
    cid = correlation_id or generate_correlation_id()
    token = _correlation_id.set(cid)
    try:
        yield cid
    finally:
        _correlation_id.reset(token)


class CorrelationLoggerAdapter(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Prefixes messages with the current correlation id.

    The id is also exposed as ``record.correlation_id`` for formatters.
    """

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        cid = get_correlation_id() or "-"
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("correlation_id", cid)
        kwargs["extra"] = extra
        return f"[{cid}] {msg}", kwargs


def get_logger(name: str) -> CorrelationLoggerAdapter:
    """Return a module logger that stamps the correlation id on every line."""
    return CorrelationLoggerAdapter(logging.getLogger(name), {})
