"""
SQLite persistence for authors, publishers and books.

This module is the only place that talks to the database. Lookups raise
``RecordNotFound`` and writes validate the record first, raising
``RecordInvalid`` with every violation found. Writes run inside an
immediate transaction so the validation and the write see the same data.
"""

from __future__ import annotations

import re
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .errors import RecordInvalid, RecordNotFound
from .utils import ensure_directory

# Default database path
DEFAULT_DB_PATH = Path("data/catalog.db")

# Range of a SQLite INTEGER column
SQLITE_MIN_INTEGER = -(2**63)
SQLITE_MAX_INTEGER = 2**63 - 1

_ID_PATTERN = re.compile(r"[0-9]+")

BOOK_COLUMNS = ("title", "genre", "language", "edition", "place", "year", "author_id", "publisher_id")

SCHEMA = """
CREATE TABLE IF NOT EXISTS authors (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS publishers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS books (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    genre TEXT,
    language TEXT,
    edition TEXT,
    place TEXT,
    year INTEGER,
    author_id INTEGER NOT NULL REFERENCES authors(id),
    publisher_id INTEGER NOT NULL REFERENCES publishers(id),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_books_author_id ON books(author_id);
CREATE INDEX IF NOT EXISTS idx_books_publisher_id ON books(publisher_id);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _deserialize_datetime(s: str) -> Optional[datetime]:
    """Deserialize ISO format string to datetime."""
    if not s:
        return None
    return datetime.fromisoformat(s)


def _coerce_id(model: str, record_id: Any) -> int:
    """Primary keys arrive as raw path segments; anything non-integer cannot match."""
    if isinstance(record_id, bool) or not _ID_PATTERN.fullmatch(str(record_id)):
        raise RecordNotFound(model, record_id)
    key = int(record_id)
    if key > SQLITE_MAX_INTEGER:
        raise RecordNotFound(model, record_id)
    return key


def _storable(value: int) -> bool:
    return SQLITE_MIN_INTEGER <= value <= SQLITE_MAX_INTEGER


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class CatalogDatabase:
    """
    SQLite database holding the catalog.

    A connection is opened per operation, so one instance can be shared
    across request threads.
    """

    def __init__(self, db_path: Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        ensure_directory(self.db_path.parent)
        self._init_db()

    @contextmanager
    def _get_connection(self, write: bool = False):
        """Get a database connection, committing on success and rolling back on error."""
        conn = sqlite3.connect(str(self.db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        try:
            if write:
                conn.execute("BEGIN IMMEDIATE")
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.executescript(SCHEMA)

    # -- generic helpers ---------------------------------------------------

    def _fetch(self, conn: sqlite3.Connection, table: str, model: str, record_id: Any) -> sqlite3.Row:
        key = _coerce_id(model, record_id)
        row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (key,)).fetchone()
        if row is None:
            raise RecordNotFound(model, record_id)
        return row

    def _exists(self, conn: sqlite3.Connection, table: str, record_id: Optional[int]) -> bool:
        if record_id is None or not _storable(record_id):
            return False
        return conn.execute(f"SELECT 1 FROM {table} WHERE id = ?", (record_id,)).fetchone() is not None

    def _insert_named(self, table: str, name: Optional[str]) -> Dict[str, Any]:
        if _blank(name):
            raise RecordInvalid([("name", "can't be blank")])
        now = _now()
        with self._get_connection(write=True) as conn:
            cursor = conn.execute(
                f"INSERT INTO {table} (name, created_at, updated_at) VALUES (?, ?, ?)",
                (name, now, now),
            )
            row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (cursor.lastrowid,)).fetchone()
            return self._row_to_dict(row)

    def _list(self, table: str) -> List[Dict[str, Any]]:
        with self._get_connection() as conn:
            rows = conn.execute(f"SELECT * FROM {table} ORDER BY id ASC").fetchall()
            return [self._row_to_dict(row) for row in rows]

    # -- authors and publishers -------------------------------------------

    def create_author(self, name: Optional[str]) -> Dict[str, Any]:
        return self._insert_named("authors", name)

    def get_author(self, author_id: Any) -> Dict[str, Any]:
        with self._get_connection() as conn:
            return self._row_to_dict(self._fetch(conn, "authors", "Author", author_id))

    def list_authors(self) -> List[Dict[str, Any]]:
        return self._list("authors")

    def create_publisher(self, name: Optional[str]) -> Dict[str, Any]:
        return self._insert_named("publishers", name)

    def get_publisher(self, publisher_id: Any) -> Dict[str, Any]:
        with self._get_connection() as conn:
            return self._row_to_dict(self._fetch(conn, "publishers", "Publisher", publisher_id))

    def list_publishers(self) -> List[Dict[str, Any]]:
        return self._list("publishers")

    # -- books -------------------------------------------------------------

    def _book_errors(self, conn: sqlite3.Connection, attrs: Dict[str, Any]) -> List[Tuple[str, str]]:
        """Collect violations in declaration order: references first, then title."""
        errors: List[Tuple[str, str]] = []
        if not self._exists(conn, "authors", attrs.get("author_id")):
            errors.append(("author", "must exist"))
        if not self._exists(conn, "publishers", attrs.get("publisher_id")):
            errors.append(("publisher", "must exist"))
        if _blank(attrs.get("title")):
            errors.append(("title", "can't be blank"))
        return errors

    def count_books(self) -> int:
        with self._get_connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]

    def list_books(self, limit: int, offset: int = 0) -> List[Dict[str, Any]]:
        """
        List one slice of books ordered by id ascending.

        Args:
            limit: Maximum number of rows to return
            offset: Number of rows to skip

        Returns:
            List of book dictionaries, empty past the end of the table
        """
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM books ORDER BY id ASC LIMIT ? OFFSET ?",
                (limit, offset),
            ).fetchall()
            return [self._row_to_dict(row) for row in rows]

    def get_book(self, book_id: Any) -> Dict[str, Any]:
        with self._get_connection() as conn:
            return self._row_to_dict(self._fetch(conn, "books", "Book", book_id))

    def create_book(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate and insert a book.

        Args:
            attrs: Book attributes; keys outside ``BOOK_COLUMNS`` are ignored

        Returns:
            The stored book

        Raises:
            RecordInvalid: If the title is blank or a reference is dangling
        """
        values = {column: attrs.get(column) for column in BOOK_COLUMNS}
        now = _now()
        with self._get_connection(write=True) as conn:
            errors = self._book_errors(conn, values)
            if errors:
                raise RecordInvalid(errors)
            cursor = conn.execute(
                f"INSERT INTO books ({', '.join(BOOK_COLUMNS)}, created_at, updated_at) "
                f"VALUES ({', '.join('?' for _ in BOOK_COLUMNS)}, ?, ?)",
                (*values.values(), now, now),
            )
            row = conn.execute("SELECT * FROM books WHERE id = ?", (cursor.lastrowid,)).fetchone()
            return self._row_to_dict(row)

    def update_book(self, book_id: Any, attrs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Assign the supplied attributes to an existing book and save it.

        Args:
            book_id: The book's primary key
            attrs: Attributes to change; absent keys keep their stored value

        Returns:
            The updated book

        Raises:
            RecordNotFound: If no book has this id
            RecordInvalid: If the resulting record fails validation
        """
        with self._get_connection(write=True) as conn:
            current = dict(self._fetch(conn, "books", "Book", book_id))
            changes = {column: attrs[column] for column in BOOK_COLUMNS if column in attrs}
            merged = {**current, **changes}

            errors = self._book_errors(conn, merged)
            if errors:
                raise RecordInvalid(errors)

            if changes:
                assignments = ", ".join(f"{column} = ?" for column in changes)
                conn.execute(
                    f"UPDATE books SET {assignments}, updated_at = ? WHERE id = ?",
                    (*changes.values(), _now(), current["id"]),
                )
            row = conn.execute("SELECT * FROM books WHERE id = ?", (current["id"],)).fetchone()
            return self._row_to_dict(row)

    def delete_book(self, book_id: Any) -> Dict[str, Any]:
        """
        Delete a book.

        Returns:
            The book as it was before deletion

        Raises:
            RecordNotFound: If no book has this id
        """
        with self._get_connection(write=True) as conn:
            row = self._fetch(conn, "books", "Book", book_id)
            conn.execute("DELETE FROM books WHERE id = ?", (row["id"],))
            return self._row_to_dict(row)

    def _row_to_dict(self, row: sqlite3.Row) -> Dict[str, Any]:
        """Convert a database row to a record dictionary."""
        record = dict(row)
        record["created_at"] = _deserialize_datetime(record["created_at"])
        record["updated_at"] = _deserialize_datetime(record["updated_at"])
        return record
