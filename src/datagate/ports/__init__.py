from .cache import ICacheService
from .datasource import DataSourceType, IDataSource

__all__ = [
    "DataSourceType",
    "ICacheService",
    "IDataSource",
]
