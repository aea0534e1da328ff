import logging
import sqlite3
from typing import Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

ParamValue = Union[str, int, float, bytes, None]
Row = Tuple[Optional[str], ...]


class StoreOpenError(Exception):
    """Raised when the database file cannot be opened or is not a database."""

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(f"{filename}: {message}")
        self.filename = filename
        self.message = message


class ParameterCountError(ValueError):
    """The supplied parameters do not match the statement's placeholders."""


def _as_text(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class Database:
    """A single SQLite connection with at most one open statement.

    ``select`` leaves its statement open for ``fetch_row``; ``execute`` and
    ``scalar_value`` finalize theirs before returning. Preparing a new
    statement always finalizes the previous one.
    """

    def __init__(self, filename: str, connection: sqlite3.Connection) -> None:
        self._filename = filename
        self._conn: Optional[sqlite3.Connection] = connection
        self._cursor: Optional[sqlite3.Cursor] = None
        self._column_count = 0
        self._last_error: Optional[str] = None

    @classmethod
    def open(cls, filename: str) -> "Database":
        """Open (or create) ``filename``. Raises StoreOpenError on failure."""
        try:
            conn = sqlite3.connect(filename, isolation_level=None)
        except sqlite3.Error as e:
            logger.error(f"Could not open {filename}: {e}")
            raise StoreOpenError(filename, str(e)) from e
        # sqlite opens lazily; touch the header so unreadable files fail here
        try:
            conn.execute("PRAGMA schema_version").fetchone()
        except sqlite3.Error as e:
            conn.close()
            logger.error(f"Could not open {filename}: {e}")
            raise StoreOpenError(filename, str(e)) from e
        logger.debug(f"Opened database {filename}")
        return cls(filename, conn)

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------- Statement lifecycle ------------------------- #
    def _reset_statement(self) -> None:
        self._column_count = 0
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None

    def _record_error(self, error: sqlite3.Error) -> None:
        self._last_error = str(error)
        logger.info(f"SQLite error: {error}")

    def _prepare(self, query: str, params: Sequence[ParamValue]) -> bool:
        self._reset_statement()
        if isinstance(params, (str, bytes)):
            raise TypeError("params must be a sequence of values, not a single string")
        values = tuple(params)
        if self._conn is None:
            logger.info(f"No open connection for query: {query}")
            return False
        logger.debug(f"Query: {query} params={values!r}")
        try:
            cursor = self._conn.execute(query, values)
        except sqlite3.ProgrammingError as e:
            # "Incorrect number of bindings supplied ..."
            if "bindings" in str(e):
                raise ParameterCountError(str(e)) from e
            self._record_error(e)
            return False
        except sqlite3.Error as e:
            self._record_error(e)
            return False
        self._last_error = None
        self._cursor = cursor
        self._column_count = len(cursor.description) if cursor.description else 0
        return True

    # ------------------------- Queries ------------------------- #
    def select(self, query: str, params: Sequence[ParamValue] = ()) -> int:
        """Prepare ``query`` for row iteration and return its column count."""
        if not self._prepare(query, params):
            self.report_error("Query failed")
            return 0
        return self._column_count

    def execute(self, query: str, params: Sequence[ParamValue] = ()) -> int:
        """Run ``query`` once and return the number of rows it changed.

        Failures return 0 without printing; the caller decides how to report
        them (``report_error`` still has the engine message).
        """
        if not self._prepare(query, params):
            return 0
        changes = self._cursor.rowcount
        self._reset_statement()
        return max(changes, 0)

    def scalar_value(self, query: str, params: Sequence[ParamValue] = ()) -> Optional[str]:
        """First column of the first row, or None."""
        if not self.select(query, params):
            return None
        row = self.fetch_row()
        self._reset_statement()
        if row is None:
            return None
        return row[0]

    def fetch_row(self) -> Optional[Row]:
        """Next row of the open statement as text values, or None when done."""
        if self._cursor is None:
            self._reset_statement()
            return None
        try:
            values = self._cursor.fetchone()
        except sqlite3.Error as e:
            self._record_error(e)
            self.report_error("Fetch failed")
            self._reset_statement()
            return None
        if values is None:
            self._reset_statement()
            return None
        return tuple(_as_text(value) for value in values)

    def column_count(self) -> int:
        return self._column_count

    def column_names(self) -> Optional[Tuple[str, ...]]:
        if self._cursor is None or not self._cursor.description:
            return None
        return tuple(column[0] for column in self._cursor.description)

    def filename(self) -> str:
        return self._filename

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    def report_error(self, context: Optional[str] = None) -> None:
        """Print the engine's last error message, prefixed by ``context``."""
        if self._conn is None:
            message = "Unknown error"
        else:
            message = self._last_error or "not an error"
        print(f"{context}: {message}" if context else message)

    def close(self) -> None:
        self._reset_statement()
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug(f"Closed database {self._filename}")
