from .errors import (
    SqliteBusy,
    SqliteDone,
    SqliteError,
    SqliteErrorKind,
    SqliteStepError,
    is_busy_code,
)
from .sqlite_manager import SqliteDatabase, Statement, open_database


__all__ = [
    "SqliteBusy",
    "SqliteDatabase",
    "SqliteDone",
    "SqliteError",
    "SqliteErrorKind",
    "SqliteStepError",
    "Statement",
    "is_busy_code",
    "open_database",
]
