from .cache import RedisCacheService

__all__ = ["RedisCacheService"]
