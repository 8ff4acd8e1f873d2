from .cache import InMemoryCacheService

__all__ = ["InMemoryCacheService"]
