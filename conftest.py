import pytest

import database
from book import Book
from library import Library
from ui_helpers import OUTPUT_MODE_ENV


@pytest.fixture
def db_file(tmp_path, monkeypatch):
    # Every test gets its own empty database file
    path = str(tmp_path / "books-test.db")
    monkeypatch.setattr(database, "DATABASE_FILE", path)
    database.initialize_database()
    return path


@pytest.fixture
def lib(db_file):
    return Library()


@pytest.fixture
def sample_book(lib):
    book = Book(
        isbn="1234567",
        amazon_url="https://amazon.com/test",
        author="Tester",
        language="English",
        pages=250,
        publisher="Test Publisher",
        title="The Test Book",
        year=2024,
    )
    lib.add_book(book)
    return book


@pytest.fixture(autouse=True)
def plain_cli_output(monkeypatch):
    # The CLI's --output flag writes to os.environ; restore it after each test
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")
