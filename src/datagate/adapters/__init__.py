"""Cache adapters implementing :class:`~datagate.ports.cache.ICacheService`."""
