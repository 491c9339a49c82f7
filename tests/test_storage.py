"""
Tests for the mapping storage backends and error classification.
"""
import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from shortener_app.storage.exceptions import (
    DuplicateShortCodeError,
    RecordNotFoundError,
    StorageError,
    is_unique_violation,
)
from shortener_app.storage.factory import MappingStorageFactory, StorageBackend
from shortener_app.storage.strategies import InMemoryMappingStorage, SQLAlchemyMappingStorage


@pytest.fixture(params=["sqlite", "memory"])
def storage(request, sqlite_storage, memory_storage):
    """Run the contract tests against every backend"""
    if request.param == "sqlite":
        return sqlite_storage
    return memory_storage


class TestStorageContract:
    """Behaviour every MappingStorage must share"""

    def test_insert_and_lookup(self, storage):
        storage.insert("short123", "very-long-name")

        assert storage.lookup("short123") == "very-long-name"

    def test_duplicate_code_rejected(self, storage):
        storage.insert("short123", "very-long-name")

        with pytest.raises(DuplicateShortCodeError):
            storage.insert("short123", "very-long-name")

    def test_duplicate_code_does_not_overwrite(self, storage):
        storage.insert("short123", "very-long-name")

        with pytest.raises(DuplicateShortCodeError):
            storage.insert("short123", "other-long-name")

        assert storage.lookup("short123") == "very-long-name"

    def test_duplicate_long_url_allowed(self, storage):
        storage.insert("short123", "very-long-name")
        storage.insert("short456", "very-long-name")

        assert storage.lookup("short123") == storage.lookup("short456")

    def test_long_url_as_code_is_independent(self, storage):
        storage.insert("short123", "very-long-name")
        storage.insert("very-long-name", "something")

        assert storage.lookup("very-long-name") == "something"

    def test_lookup_missing(self, storage):
        with pytest.raises(RecordNotFoundError):
            storage.lookup("non-existing")

    def test_get_mapping(self, storage):
        storage.insert("short123", "very-long-name")

        mapping = storage.get_mapping("short123")

        assert mapping.short_code == "short123"
        assert mapping.long_url == "very-long-name"
        assert mapping.created_at is not None

    def test_long_url_stored_exactly(self, storage):
        long_url = "https://example.com/ü?q=%20a b#frag"
        storage.insert("short123", long_url)

        assert storage.lookup("short123") == long_url

    def test_errors_are_storage_errors(self, storage):
        """Callers can catch the whole family through StorageError"""
        storage.insert("short123", "very-long-name")

        with pytest.raises(StorageError):
            storage.insert("short123", "very-long-name")
        with pytest.raises(StorageError):
            storage.lookup("missing")


class TestSQLAlchemyStorage:
    """SQLAlchemy specific behaviour"""

    def test_duplicate_keeps_driver_error(self, sqlite_storage):
        sqlite_storage.insert("short123", "very-long-name")

        with pytest.raises(DuplicateShortCodeError) as exc_info:
            sqlite_storage.insert("short123", "very-long-name")

        assert isinstance(exc_info.value.cause, IntegrityError)

    def test_init_schema_is_idempotent(self, sqlite_storage):
        sqlite_storage.insert("short123", "very-long-name")

        sqlite_storage.init_schema()

        assert sqlite_storage.lookup("short123") == "very-long-name"

    def test_missing_table_is_storage_error(self, tmp_path):
        """Failures other than conflicts are not reported as conflicts"""
        from shortener_app.database.connection import build_engine

        engine = build_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        storage = SQLAlchemyMappingStorage(engine)

        with pytest.raises(StorageError) as exc_info:
            storage.insert("short123", "very-long-name")

        assert not isinstance(exc_info.value, DuplicateShortCodeError)
        assert isinstance(exc_info.value.cause, OperationalError)
        engine.dispose()


class TestIsUniqueViolation:
    """Test the conflict classification predicate"""

    @staticmethod
    def integrity_error(message):
        return IntegrityError("INSERT INTO urls ...", {}, Exception(message))

    @pytest.mark.parametrize("message", [
        "UNIQUE constraint failed: urls.short_code",
        'duplicate key value violates unique constraint "ix_urls_short_code"',
        "Duplicate entry 'AAAAAAAA' for key 'ix_urls_short_code'",
    ])
    def test_short_code_conflicts(self, message):
        assert is_unique_violation(self.integrity_error(message))

    @pytest.mark.parametrize("message", [
        "NOT NULL constraint failed: urls.short_code",
        "UNIQUE constraint failed: urls.id",
        "NOT NULL constraint failed: urls.long_url",
    ])
    def test_other_integrity_errors(self, message):
        assert not is_unique_violation(self.integrity_error(message))

    def test_non_integrity_errors(self):
        assert not is_unique_violation(ValueError("UNIQUE constraint failed: urls.short_code"))

    @staticmethod
    def driver_error(message, **attrs):
        """IntegrityError wrapping a driver exception with error code attributes"""
        orig = Exception(message)
        for name, value in attrs.items():
            setattr(orig, name, value)
        return IntegrityError("INSERT INTO urls ...", {}, orig)

    def test_sqlite_unique_code(self):
        exc = self.driver_error(
            "UNIQUE constraint failed: urls.short_code",
            sqlite_errorname="SQLITE_CONSTRAINT_UNIQUE",
        )

        assert is_unique_violation(exc)

    def test_sqlite_code_wins_over_message(self):
        """A non-unique sqlite code is not a conflict whatever the text says"""
        exc = self.driver_error(
            "unique short_code check",
            sqlite_errorname="SQLITE_CONSTRAINT_NOTNULL",
        )

        assert not is_unique_violation(exc)

    def test_pgcode_with_constraint_name(self):
        exc = self.driver_error(
            "could not insert row",
            pgcode="23505",
            diag=type("Diag", (), {"constraint_name": "ix_urls_short_code"})(),
        )

        assert is_unique_violation(exc)

    def test_pgcode_other_constraint(self):
        exc = self.driver_error(
            'duplicate key value violates unique constraint "urls_pkey"',
            pgcode="23505",
            diag=type("Diag", (), {"constraint_name": "urls_pkey"})(),
        )

        assert not is_unique_violation(exc)

    def test_pgcode_not_null(self):
        """SQLSTATE 23502 is not a conflict even when the message looks like one"""
        exc = self.driver_error("duplicate short_code", pgcode="23502")

        assert not is_unique_violation(exc)

    def test_psycopg3_sqlstate(self):
        exc = self.driver_error(
            'duplicate key value violates unique constraint "ix_urls_short_code"',
            sqlstate="23505",
        )

        assert is_unique_violation(exc)


class TestMappingStorageFactory:
    """Test storage factory"""

    def setup_method(self):
        MappingStorageFactory.clear_instance()

    def teardown_method(self):
        MappingStorageFactory.clear_instance()

    def test_creates_memory_storage(self):
        storage = MappingStorageFactory.create(StorageBackend.MEMORY)

        assert isinstance(storage, InMemoryMappingStorage)

    def test_returns_cached_instance(self):
        first = MappingStorageFactory.create(StorageBackend.MEMORY)
        second = MappingStorageFactory.create(StorageBackend.MEMORY)

        assert first is second
