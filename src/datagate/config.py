"""DataSourceConfig — explicit connection settings for a backend."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_LIMIT = 20
AIRTABLE_API_URL = "https://api.airtable.com/v0"

_MISSING = object()


def _lookup(settings: Mapping[str, Any], dotted: str) -> Any:
    """Resolve ``a.b.c`` from either a flat dotted key or nested mappings."""
    if dotted in settings:
        return settings[dotted]
    node: Any = settings
    for part in dotted.split("."):
        if not hasattr(node, "get"):
            return _MISSING
        node = node.get(part, _MISSING)
        if node is _MISSING:
            return _MISSING
    return node


@dataclass(frozen=True, repr=False)
class DataSourceConfig:
    """Configuration for a data source connection.

    Attributes:
        host: Connection string ``scheme://apiKey@containerId``.
        default_limit: Page size used when a caller gives none.
        timeout: Per-request HTTP timeout in seconds.
        api_url: Root URL of the backend REST API.
        timezone: Overrides the detected local zone for created date fields.
    """

    host: str
    default_limit: int = DEFAULT_LIMIT
    timeout: float = 30.0
    api_url: str = AIRTABLE_API_URL
    timezone: str | None = None

    def __post_init__(self) -> None:
        # Fail fast on a malformed connection string.
        self._split()
        if self.default_limit < 1:
            raise ConfigurationError("database.defaults.limit must be positive")

    def _split(self) -> tuple[str, str, str]:
        scheme, sep, rest = self.host.partition("://")
        if not sep or not scheme:
            raise ConfigurationError(
                "database.host must look like scheme://apiKey@containerId"
            )
        api_key, sep, container_id = rest.rpartition("@")
        if not sep or not api_key or not container_id:
            raise ConfigurationError(
                "database.host must look like scheme://apiKey@containerId"
            )
        return scheme.lower(), api_key, container_id.strip("/")

    @property
    def scheme(self) -> str:
        return self._split()[0]

    @property
    def api_key(self) -> str:
        return self._split()[1]

    @property
    def container_id(self) -> str:
        return self._split()[2]

    @classmethod
    def from_mapping(cls, settings: Mapping[str, Any]) -> DataSourceConfig:
        """Build from a configuration mapping using ``database.*`` keys."""
        host = _lookup(settings, "database.host")
        if host is _MISSING or not host:
            raise ConfigurationError("database.host is not configured")
        limit = _lookup(settings, "database.defaults.limit")
        if limit is _MISSING or limit in (None, ""):
            limit = DEFAULT_LIMIT
        try:
            default_limit = int(limit)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"database.defaults.limit must be an integer, got {limit!r}"
            ) from e
        kwargs: dict[str, Any] = {"host": str(host), "default_limit": default_limit}
        timeout = _lookup(settings, "database.timeout")
        if timeout is not _MISSING and timeout is not None:
            kwargs["timeout"] = float(timeout)
        tz = _lookup(settings, "database.timezone")
        if tz is not _MISSING and tz:
            kwargs["timezone"] = str(tz)
        return cls(**kwargs)

    def __repr__(self) -> str:
        # Keep the API key out of logs and tracebacks.
        return (
            f"DataSourceConfig(scheme={self.scheme!r}, "
            f"container_id={self.container_id!r}, "
            f"default_limit={self.default_limit})"
        )
