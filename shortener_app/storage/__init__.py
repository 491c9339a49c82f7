"""
Mapping storage module (the persistence port).

This module implements the Strategy Pattern for pluggable mapping storage.
The service depends only on MappingStorage and the exceptions below.
"""

from .exceptions import (
    StorageError,
    DuplicateShortCodeError,
    RecordNotFoundError,
    is_unique_violation,
)
from .models import Mapping
from .strategies import MappingStorage, SQLAlchemyMappingStorage, InMemoryMappingStorage
from .factory import MappingStorageFactory, StorageBackend

__all__ = [
    "StorageError",
    "DuplicateShortCodeError",
    "RecordNotFoundError",
    "is_unique_violation",
    "Mapping",
    "MappingStorage",
    "SQLAlchemyMappingStorage",
    "InMemoryMappingStorage",
    "MappingStorageFactory",
    "StorageBackend",
]
