import logging
import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from book import BOOK_FIELDS, UPDATABLE_FIELDS, Book
from database import get_db_connection

logger = logging.getLogger(__name__)

_COLUMNS = ", ".join(BOOK_FIELDS)


class Library:
    """Maps book operations onto the books table, one parameterized statement each."""

    def __init__(self, db_file: Optional[str] = None) -> None:
        # None means "whatever database.DATABASE_FILE points at when the call runs".
        self.db_file = db_file

    # ------------------------- Core operations ------------------------- #
    def list_books(self) -> List[Book]:
        conn = get_db_connection(self.db_file)
        try:
            cursor = conn.execute(f"SELECT {_COLUMNS} FROM books ORDER BY title")
            return [Book.from_dict(dict(row)) for row in cursor.fetchall()]
        finally:
            conn.close()

    def find_book(self, isbn: str) -> Optional[Book]:
        conn = get_db_connection(self.db_file)
        try:
            row = conn.execute(f"SELECT {_COLUMNS} FROM books WHERE isbn = ?", (isbn,)).fetchone()
            return Book.from_dict(dict(row)) if row else None
        finally:
            conn.close()

    def add_book(self, book: Book) -> Book:
        """Insert a new book. Raises ValueError if the ISBN is already taken."""
        placeholders = ", ".join("?" for _ in BOOK_FIELDS)
        conn = get_db_connection(self.db_file)
        try:
            conn.execute(f"INSERT INTO books ({_COLUMNS}) VALUES ({placeholders})", book.to_row())
            conn.commit()
        except sqlite3.IntegrityError as e:
            raise ValueError(f"Book with ISBN {book.isbn} already exists.") from e
        finally:
            conn.close()
        logger.info(f"Book created: isbn={book.isbn}")
        return book

    def update_book(self, isbn: str, fields: Dict[str, Any]) -> Optional[Book]:
        """Replace every non-key column of a book. Returns the updated book or None if not found."""
        assignments = ", ".join(f"{name} = ?" for name in UPDATABLE_FIELDS)
        values = [fields[name] for name in UPDATABLE_FIELDS]

        conn = get_db_connection(self.db_file)
        try:
            cursor = conn.execute(f"UPDATE books SET {assignments} WHERE isbn = ?", (*values, isbn))
            conn.commit()
            if cursor.rowcount == 0:
                return None
        finally:
            conn.close()
        logger.info(f"Book updated: isbn={isbn}")
        return Book(isbn=isbn, **{name: fields[name] for name in UPDATABLE_FIELDS})

    def remove_book(self, isbn: str) -> bool:
        conn = get_db_connection(self.db_file)
        try:
            cursor = conn.execute("DELETE FROM books WHERE isbn = ?", (isbn,))
            conn.commit()
            removed = cursor.rowcount > 0
        finally:
            conn.close()
        if removed:
            logger.info(f"Book deleted: isbn={isbn}")
        return removed

    def count_books(self) -> int:
        conn = get_db_connection(self.db_file)
        try:
            return conn.execute("SELECT COUNT(*) FROM books").fetchone()[0]
        finally:
            conn.close()

    def import_books(self, books: Iterable[Book]) -> int:
        """Bulk insert; books whose ISBN already exists are left untouched.

        Returns the number of rows actually inserted.
        """
        placeholders = ", ".join("?" for _ in BOOK_FIELDS)
        conn = get_db_connection(self.db_file)
        try:
            before = conn.total_changes
            conn.executemany(
                f"INSERT OR IGNORE INTO books ({_COLUMNS}) VALUES ({placeholders})",
                [book.to_row() for book in books],
            )
            conn.commit()
            inserted = conn.total_changes - before
        finally:
            conn.close()
        logger.info(f"Imported {inserted} books")
        return inserted
