"""
Mapping storage strategies using Strategy Pattern.

Allows switching between persistence backends:
- SQLAlchemy: any database SQLAlchemy speaks to (SQLite, PostgreSQL, ...)
- InMemory: development and testing
"""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from shortener_app.database.connection import Base
from shortener_app.models.url import URL
from .exceptions import (
    DuplicateShortCodeError,
    RecordNotFoundError,
    StorageError,
    is_unique_violation,
)
from .models import Mapping


logger = logging.getLogger(__name__)


class MappingStorage(ABC):
    """
    Abstract base class for mapping storage (the persistence port).

    The service relies on insert being a single atomic operation at the
    store: two callers inserting the same short code must end with exactly
    one success and one DuplicateShortCodeError. Implementations must never
    check for the code first and insert afterwards.

    Pattern: Strategy Pattern
    """

    @abstractmethod
    def init_schema(self) -> None:
        """Create the mapping table if it is absent. Called once at startup."""
        pass

    @abstractmethod
    def insert(self, short_code: str, long_url: str) -> None:
        """
        Atomically store a new mapping.

        Args:
            short_code: Unique key of the mapping
            long_url: Destination URL (may repeat across mappings)

        Raises:
            DuplicateShortCodeError: short_code is already stored
            StorageError: any other failure
        """
        pass

    @abstractmethod
    def lookup(self, short_code: str) -> str:
        """
        Get the long URL stored for short_code.

        Raises:
            RecordNotFoundError: nothing stored under short_code
            StorageError: any other failure
        """
        pass

    @abstractmethod
    def get_mapping(self, short_code: str) -> Mapping:
        """Get the full stored record. Raises like lookup()."""
        pass


class SQLAlchemyMappingStorage(MappingStorage):
    """
    SQLAlchemy implementation.

    Uses one short-lived session per call so a single instance can be
    shared by every request thread. Uniqueness is enforced by the unique
    constraint on urls.short_code.
    """

    def __init__(self, engine: Engine):
        """
        Args:
            engine: SQLAlchemy engine (shared, thread-safe)
        """
        self.engine = engine
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=engine
        )

    def init_schema(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as e:
            raise StorageError(f"unable to create schema: {e}", e) from e
        logger.info("Mapping schema ready on %s", self.engine.url.render_as_string(hide_password=True))

    def insert(self, short_code: str, long_url: str) -> None:
        with self._session_factory() as session:
            session.add(URL(short_code=short_code, long_url=long_url))
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                if is_unique_violation(e):
                    raise DuplicateShortCodeError(short_code, e) from e
                raise StorageError(f"insert failed: {e}", e) from e
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError(f"insert failed: {e}", e) from e

    def lookup(self, short_code: str) -> str:
        return self._get_row(short_code).long_url

    def get_mapping(self, short_code: str) -> Mapping:
        return self._get_row(short_code)

    def _get_row(self, short_code: str) -> Mapping:
        with self._session_factory() as session:
            try:
                url = session.query(URL).filter(URL.short_code == short_code).first()
            except SQLAlchemyError as e:
                raise StorageError(f"lookup failed: {e}", e) from e

            if url is None:
                raise RecordNotFoundError(short_code)

            # Copy out while the session is open
            return Mapping.model_validate(url)


class InMemoryMappingStorage(MappingStorage):
    """
    In-memory implementation using a Python dict.

    Pros:
    - No external dependencies
    - Good for development and testing

    Cons:
    - Lost on restart
    - Not shared between processes

    The lock makes check-and-insert one atomic step.
    """

    def __init__(self):
        self._mappings: Dict[str, Mapping] = {}
        self._lock = threading.Lock()

    def init_schema(self) -> None:
        pass

    def insert(self, short_code: str, long_url: str) -> None:
        mapping = Mapping(
            short_code=short_code,
            long_url=long_url,
            created_at=datetime.now(timezone.utc),
        )
        with self._lock:
            if short_code in self._mappings:
                raise DuplicateShortCodeError(short_code)
            self._mappings[short_code] = mapping

    def lookup(self, short_code: str) -> str:
        return self.get_mapping(short_code).long_url

    def get_mapping(self, short_code: str) -> Mapping:
        with self._lock:
            mapping = self._mappings.get(short_code)
        if mapping is None:
            raise RecordNotFoundError(short_code)
        return mapping

    def __len__(self) -> int:
        with self._lock:
            return len(self._mappings)
