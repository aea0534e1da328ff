import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from book import Book
from database import Database, ParamValue, Row

logger = logging.getLogger(__name__)

SQL_CREATE_TABLE = """
    CREATE TABLE IF NOT EXISTS books (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title VARCHAR(127) CHECK(title != ''),
        first_name VARCHAR(127) CHECK(first_name != ''),
        last_name VARCHAR(127) CHECK(last_name != '')
    )
"""
SQL_CHECK_TABLE = "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'books'"
SQL_INSERT = "INSERT INTO books (title, first_name, last_name) VALUES (?, ?, ?)"
SQL_DROP_TABLE = "DROP TABLE IF EXISTS books"
SQL_DELETE_BY_ID = "DELETE FROM books WHERE id = ?"
SQL_LIST = "SELECT * FROM books"
SQL_LIST_BY_AUTHOR = "SELECT * FROM books ORDER BY last_name"
SQL_LIST_BY_TITLE = "SELECT * FROM books ORDER BY title"
SQL_FIND_BY_AUTHOR = "SELECT * FROM books WHERE last_name LIKE ?"
SQL_FIND_BY_TITLE = "SELECT * FROM books WHERE title LIKE ?"


@dataclass
class ResultSet:
    """Column names and text rows of one list or search, in query order."""

    columns: Tuple[str, ...] = ()
    rows: List[Row] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def as_dicts(self) -> List[dict]:
        return [dict(zip(self.columns, row)) for row in self.rows]


class Diary:
    """The book catalog kept in a single ``books`` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    # ------------------------- Schema ------------------------- #
    def table_exists(self) -> bool:
        return self.db.scalar_value(SQL_CHECK_TABLE) is not None

    def ensure_schema(self) -> bool:
        """Create the books table if it is missing. Returns True if it was created."""
        if self.table_exists():
            return False
        self.db.execute(SQL_CREATE_TABLE)
        if not self.table_exists():
            self.db.report_error("Could not create table")
            return False
        logger.info(f"Created books table in {self.db.filename()}")
        return True

    # ------------------------- Queries ------------------------- #
    def _fetch(self, query: str, params: Sequence[ParamValue] = ()) -> ResultSet:
        if not self.db.select(query, params):
            return ResultSet()
        result = ResultSet(columns=self.db.column_names() or ())
        row = self.db.fetch_row()
        while row is not None:
            result.rows.append(row)
            row = self.db.fetch_row()
        return result

    def list_books(self) -> ResultSet:
        return self._fetch(SQL_LIST)

    def list_books_by_author(self) -> ResultSet:
        return self._fetch(SQL_LIST_BY_AUTHOR)

    def list_books_by_title(self) -> ResultSet:
        return self._fetch(SQL_LIST_BY_TITLE)

    def find_by_author(self, pattern: str) -> ResultSet:
        """Books whose last name matches the LIKE ``pattern`` (wildcards allowed)."""
        return self._fetch(SQL_FIND_BY_AUTHOR, (pattern,))

    def find_by_title(self, pattern: str) -> ResultSet:
        """Books whose title matches the LIKE ``pattern`` (wildcards allowed)."""
        return self._fetch(SQL_FIND_BY_TITLE, (pattern,))

    # ------------------------- Changes ------------------------- #
    def add_book(self, book: Book) -> bool:
        """Insert a book. Empty fields are rejected by the table's CHECK constraints."""
        return self.db.execute(SQL_INSERT, (book.title, book.first_name, book.last_name)) > 0

    def delete_book(self, book_id: str) -> bool:
        # The id is bound as entered; the INTEGER column converts numeric text.
        return self.db.execute(SQL_DELETE_BY_ID, (book_id,)) > 0

    def drop_table(self) -> None:
        self.db.execute(SQL_DROP_TABLE)
        logger.info(f"Dropped books table in {self.db.filename()}")
