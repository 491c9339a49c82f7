"""
Error taxonomy of the persistence port.

Storage implementations translate driver errors into these classes, so the
service never inspects a specific driver's error representation.
"""

from typing import Optional

from sqlalchemy.exc import IntegrityError


class StorageError(Exception):
    """Any persistence failure. Wraps the driver error in `cause`."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class DuplicateShortCodeError(StorageError):
    """An insert hit the uniqueness constraint on the short code."""

    def __init__(self, short_code: str, cause: Optional[BaseException] = None):
        self.short_code = short_code
        super().__init__(f"short code already stored: {short_code}", cause)


class RecordNotFoundError(StorageError):
    """A lookup found no mapping for the short code."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"no mapping for short code: {short_code!r}")


# SQLite extended result code for a UNIQUE constraint (sqlite3 >= Python 3.11)
SQLITE_UNIQUE_ERRORNAME = "SQLITE_CONSTRAINT_UNIQUE"
# SQLSTATE unique_violation (psycopg2 pgcode, psycopg 3 sqlstate)
UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: BaseException, column: str = "short_code") -> bool:
    """
    True if exc is a uniqueness violation on `column`.

    The kind of violation comes from the driver's structured error code
    where it has one: sqlite3's sqlite_errorname, or the SQLSTATE exposed
    by psycopg. The column comes from the PostgreSQL constraint name when
    available, otherwise from the message ("UNIQUE constraint failed:
    urls.short_code"). Drivers with no error code (MySQL "Duplicate entry
    ... for key 'ix_urls_short_code'") are classified by message alone.
    NOT NULL and other integrity failures on the same column are not
    conflicts.
    """
    if not isinstance(exc, IntegrityError):
        return False

    orig = exc.orig
    message = str(orig if orig is not None else exc).lower()

    errorname = getattr(orig, "sqlite_errorname", None)
    if errorname is not None:
        return errorname == SQLITE_UNIQUE_ERRORNAME and column in message

    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate is not None:
        if sqlstate != UNIQUE_VIOLATION_SQLSTATE:
            return False
        constraint = getattr(getattr(orig, "diag", None), "constraint_name", None)
        if constraint:
            return column in constraint.lower()
        return column in message

    if column not in message:
        return False
    return "unique" in message or "duplicate" in message
