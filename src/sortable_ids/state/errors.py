from enum import Enum

SQLITE_BUSY = 5
SQLITE_LOCKED = 6


class SqliteErrorKind(str, Enum):
    ERROR = "error"
    STEP_ERROR = "step_error"
    DONE = "done"
    BUSY = "busy"


class SqliteError(Exception):
    kind = SqliteErrorKind.ERROR

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


class SqliteStepError(SqliteError):
    kind = SqliteErrorKind.STEP_ERROR


class SqliteDone(SqliteError):
    """Raised when a row is read after the statement has run out of rows."""

    kind = SqliteErrorKind.DONE


class SqliteBusy(SqliteError):
    """The database is locked by another connection or transaction."""

    kind = SqliteErrorKind.BUSY


def is_busy_code(code: int | None) -> bool:
    """Extended result codes share the primary code in their low byte."""
    if code is None:
        return False
    return (code & 0xFF) in (SQLITE_BUSY, SQLITE_LOCKED)
