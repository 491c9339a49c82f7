"""
Factory for creating mapping storage instances.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum

from .strategies import MappingStorage, SQLAlchemyMappingStorage, InMemoryMappingStorage
from shortener_app.config import settings
from shortener_app.database.connection import build_engine


logger = logging.getLogger(__name__)


class StorageBackend(Enum):
    """Available mapping storage backends"""
    SQLALCHEMY = "sqlalchemy"
    MEMORY = "memory"


class MappingStorageFactory:
    """
    Simple factory for creating mapping storage instances.

    Gets configuration from settings (not passed as parameters).
    The schema is initialized once, when the instance is created.
    """

    _instance: MappingStorage = None  # Single cached instance

    @classmethod
    def create(cls, backend: StorageBackend) -> MappingStorage:
        """
        Create or return cached storage instance.

        Args:
            backend: Type of storage backend (from enum)

        Returns:
            Singleton storage instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == StorageBackend.SQLALCHEMY:
            instance = SQLAlchemyMappingStorage(build_engine(settings.database_url))

        elif backend == StorageBackend.MEMORY:
            instance = InMemoryMappingStorage()

        else:
            raise ValueError(f"Unknown storage backend: {backend}")

        instance.init_schema()
        logger.info("%s storage initialized", backend.value)

        cls._instance = instance
        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
