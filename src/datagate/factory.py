"""create_datasource — pick the backend adapter from the connection string."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .airtable import AirtableDataSource
from .config import DataSourceConfig
from .exceptions import ConfigurationError
from .ports.datasource import DataSourceType

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .ports.datasource import IDataSource

_REGISTRY: dict[DataSourceType, Callable[..., IDataSource]] = {
    DataSourceType.AIRTABLE: AirtableDataSource,
}


def create_datasource(
    config: DataSourceConfig | Mapping[str, Any], **kwargs: Any
) -> IDataSource:
    """Build the data source for ``config.host``'s scheme.

    ``config`` may also be a settings mapping with ``database.*`` keys.
    Extra keyword arguments go to the adapter (e.g. ``transport``).

    Raises:
        ConfigurationError: the scheme names no known backend.
    """
    if not isinstance(config, DataSourceConfig):
        config = DataSourceConfig.from_mapping(config)
    try:
        source_type = DataSourceType(config.scheme)
    except ValueError as e:
        raise ConfigurationError(
            f"Unsupported data source scheme {config.scheme!r}"
        ) from e
    return _REGISTRY[source_type](config, **kwargs)
