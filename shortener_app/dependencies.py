"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of storage and cache
that are injected into the URL service and routes.

Pattern: Dependency Injection
- Loose coupling between components
- Easy to test (override get_storage / get_cache)
- Flexible (swap implementations via config)
"""

from functools import lru_cache

from fastapi import Depends

from shortener_app.cache.factory import CacheFactory, CacheBackend
from shortener_app.cache.strategies import CacheStrategy
from shortener_app.storage.factory import MappingStorageFactory, StorageBackend
from shortener_app.storage.strategies import MappingStorage
from shortener_app.services.url_service import URLService
from shortener_app.config import settings


@lru_cache()
def get_storage() -> MappingStorage:
    """
    Get mapping storage instance (singleton).

    Factory gets config from settings and initializes the schema.
    @lru_cache ensures this is called only once.
    """
    backend = StorageBackend(settings.storage_backend)
    return MappingStorageFactory.create(backend)


@lru_cache()
def get_cache() -> CacheStrategy:
    """
    Get cache instance (singleton).

    Factory gets config from settings internally.
    @lru_cache ensures this is called only once.
    """
    backend = CacheBackend(settings.cache_backend)
    return CacheFactory.create(backend)


def get_url_service(
    storage: MappingStorage = Depends(get_storage),
    cache: CacheStrategy = Depends(get_cache),
) -> URLService:
    """
    Get URLService with all dependencies injected.

    The service is cheap to build and stateless, so a new one per request
    is fine. The entropy source is the default secrets.token_bytes.
    """
    return URLService(
        storage=storage,
        exists_retry=settings.exists_retry,
        cache=cache,
        cache_ttl=settings.cache_ttl,
        strict_lookup=settings.strict_short_code_lookup,
    )
