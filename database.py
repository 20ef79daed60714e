import json
import logging
import os
import sqlite3
from typing import Any, Dict, List, Optional

from config import settings

logger = logging.getLogger(__name__)

# Active database file. Tests point this at a temporary file.
DATABASE_FILE = settings.db_file


def get_db_connection(db_file: Optional[str] = None) -> sqlite3.Connection:
    """Opens a connection to the SQLite database with dict-like rows."""
    conn = sqlite3.connect(db_file or DATABASE_FILE)
    conn.row_factory = sqlite3.Row
    return conn


def create_tables(db_file: Optional[str] = None) -> None:
    """Creates the books table if it doesn't exist."""
    conn = get_db_connection(db_file)
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS books (
                isbn TEXT PRIMARY KEY,
                amazon_url TEXT,
                author TEXT,
                language TEXT,
                pages INTEGER,
                publisher TEXT,
                title TEXT,
                year INTEGER
            )
        """)
        conn.commit()
    finally:
        conn.close()
    logger.info(f"Books table ready in {db_file or DATABASE_FILE}")


def read_books_json(path: str) -> List[Dict[str, Any]]:
    """Reads book records from a JSON file.

    The file holds either an array of book objects or an object with a
    ``books`` array (the shape returned by ``GET /books``).
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"{path} does not exist.")

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("books", [])
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a list of books.")
    return [item for item in data if isinstance(item, dict)]


def initialize_database(db_file: Optional[str] = None) -> None:
    """Initializes the database, creating tables if needed."""
    create_tables(db_file)
