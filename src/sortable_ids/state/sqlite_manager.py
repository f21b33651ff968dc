import logging
import re
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, List, Optional, Type, Union

from .errors import (
    SqliteBusy,
    SqliteDone,
    SqliteError,
    SqliteStepError,
    is_busy_code,
)

logger = logging.getLogger("sortable_ids.state_manager")

INT32_MIN = -(1 << 31)
INT32_MAX = (1 << 31) - 1
INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

# sqlite3 reports the compiled parameter count when the bindings don't match it
_BINDING_COUNT_RE = re.compile(r"statement uses (\d+)")


class SqliteDatabase:
    """
    Thin client over a SQLite database file.

    Failures are translated into the small ``SqliteError`` family; busy and
    locked conditions always surface as ``SqliteBusy`` so callers can retry.
    The connection runs in autocommit mode, so every statement outside an
    explicit ``BEGIN`` commits on its own.
    """

    NO_ERROR_MESSAGE = "not an error"

    def __init__(self, path: Union[str, Path], timeout: float = 5.0):
        self.path = str(path)
        self.timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None
        self._last_error = self.NO_ERROR_MESSAGE

        self.connect()

    def connect(self):
        try:
            self._conn = sqlite3.connect(
                self.path, timeout=self.timeout, autocommit=True
            )
            logger.info(f"Opened SQLite database at {self.path}")
        except sqlite3.Error as e:
            logger.error(f"Failed to open SQLite database at {self.path}: {e}")
            self._conn = None
            raise self.translate(e) from e

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise SqliteError("Database handle is closed")
        return self._conn

    def close(self):
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None
        logger.debug(f"Closed SQLite database at {self.path}")

    def __enter__(self) -> "SqliteDatabase":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # --- Errors ---

    def translate(
        self, error: sqlite3.Error, default: Type[SqliteError] = SqliteError
    ) -> SqliteError:
        code = getattr(error, "sqlite_errorcode", None)
        self._last_error = str(error)
        if is_busy_code(code):
            logger.warning(f"SQLite busy on {self.path}: {error}")
            return SqliteBusy(str(error), code)
        return default(str(error), code)

    def errmsg(self) -> str:
        return self._last_error

    # --- Statements ---

    def exec(self, sql: str):
        """Runs one or more statements, discarding any rows."""
        try:
            self.connection.executescript(sql)
        except sqlite3.Error as e:
            raise self.translate(e) from e

    def prepare(self, sql: str) -> "Statement":
        """
        Compiles ``sql`` and returns a Statement ready for binding.

        The statement is compiled once under ``EXPLAIN`` so syntax errors and
        unknown tables or columns raise here, and so the parameter count is
        known before anything is bound.
        """
        text = sql.strip()
        if not text.endswith(";"):
            text += ";"
        if text == ";" or not sqlite3.complete_statement(text):
            self._last_error = f"incomplete SQL: {sql!r}"
            raise SqliteError(self._last_error)
        return Statement(self, sql, self._parameter_count(sql))

    def _parameter_count(self, sql: str) -> int:
        try:
            self.connection.execute(f"EXPLAIN {sql}", ()).close()
        except sqlite3.ProgrammingError as e:
            match = _BINDING_COUNT_RE.search(str(e))
            if match is None:
                raise self.translate(e) from e
            return int(match.group(1))
        except sqlite3.Error as e:
            raise self.translate(e) from e
        return 0

    @property
    def in_transaction(self) -> bool:
        return self.connection.in_transaction

    @contextmanager
    def transaction(self) -> Iterator["SqliteDatabase"]:
        """Commits the enclosed work as one unit, rolling back on any exception."""
        self.exec("BEGIN;")
        try:
            yield self
        except BaseException:
            # Some failures already roll the transaction back
            if self.in_transaction:
                self.exec("ROLLBACK;")
            raise
        self.exec("COMMIT;")

    def last_insert_rowid(self) -> int:
        try:
            return self.connection.execute("SELECT last_insert_rowid()").fetchone()[0]
        except sqlite3.Error as e:
            raise self.translate(e) from e


class Statement:
    """
    A prepared statement with 1-based parameter binding and 0-based columns.

    Bindings hold Python values, so text is passed with its exact length and
    never depends on a terminator. Parameters left unbound read as NULL.
    """

    def __init__(self, db: SqliteDatabase, sql: str, param_count: int = 0):
        self.db = db
        self.sql = sql
        self.param_count = param_count
        self._params: dict[int, Any] = {}
        self._cursor: Optional[sqlite3.Cursor] = None
        self._row: Optional[tuple] = None
        self._finalized = False

    # --- Binding ---

    def _bind(self, index: int, value: Any):
        if self._finalized:
            raise SqliteError("Statement has been finalized")
        if self._cursor is not None:
            raise SqliteError("Statement is running; call reset() before binding")
        if not 1 <= index <= self.param_count:
            raise SqliteError(
                f"Parameter index {index} out of range (1..{self.param_count})"
            )
        self._params[index] = value

    def bind_text(self, index: int, value: str):
        self._bind(index, str(value))

    def bind_int(self, index: int, value: int):
        if not INT32_MIN <= value <= INT32_MAX:
            raise SqliteError(f"Value {value} does not fit in 32 bits")
        self._bind(index, value)

    def bind_int64(self, index: int, value: int):
        if not INT64_MIN <= value <= INT64_MAX:
            raise SqliteError(f"Value {value} does not fit in 64 bits")
        self._bind(index, value)

    def bind_null(self, index: int):
        self._bind(index, None)

    def _ordered_params(self) -> List[Any]:
        return [self._params.get(i) for i in range(1, self.param_count + 1)]

    # --- Execution ---

    def step(self) -> bool:
        """Advances to the next row. Returns False once the statement is done."""
        if self._finalized:
            raise SqliteError("Statement has been finalized")
        try:
            if self._cursor is None:
                self._cursor = self.db.connection.execute(
                    self.sql, self._ordered_params()
                )
            self._row = self._cursor.fetchone()
        except sqlite3.Error as e:
            self._row = None
            raise self.db.translate(e, default=SqliteStepError) from e
        return self._row is not None

    def reset(self):
        if self._cursor is not None:
            self._cursor.close()
        self._cursor = None
        self._row = None

    def finalize(self):
        if self._finalized:
            return
        self.reset()
        self._params.clear()
        self._finalized = True

    # --- Columns ---

    def _column(self, index: int) -> Any:
        if self._row is None:
            raise SqliteDone("No current row")
        if not 0 <= index < len(self._row):
            raise SqliteError(f"Column index {index} out of range")
        return self._row[index]

    def column_text(self, index: int) -> str:
        value = self._column(index)
        if value is None:
            return ""
        if isinstance(value, bytes):
            return value.decode("utf-8", errors="replace")
        return str(value)

    def column_int64(self, index: int) -> int:
        value = self._column(index)
        if value is None:
            return 0
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0

    def column_int(self, index: int) -> int:
        # Low 32 bits, sign-extended
        value = self.column_int64(index) & 0xFFFFFFFF
        return value - (1 << 32) if value > INT32_MAX else value


def open_database(path: Union[str, Path], timeout: float = 5.0) -> SqliteDatabase:
    return SqliteDatabase(path, timeout=timeout)
