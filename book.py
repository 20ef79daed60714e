from __future__ import annotations

# Column order of the books table; isbn first.
BOOK_FIELDS = ("isbn", "amazon_url", "author", "language", "pages", "publisher", "title", "year")

# Everything an update may change.
UPDATABLE_FIELDS = BOOK_FIELDS[1:]


class Book:
    """Represents a single book record."""

    def __init__(self, isbn: str, amazon_url: str, author: str, language: str, pages: int,
                 publisher: str, title: str, year: int) -> None:
        self.isbn = isbn
        self.amazon_url = amazon_url
        self.author = author
        self.language = language
        self.pages = pages
        self.publisher = publisher
        self.title = title
        self.year = year

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} (ISBN: {self.isbn})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self) -> dict:
        return {
            "isbn": self.isbn,
            "amazon_url": self.amazon_url,
            "author": self.author,
            "language": self.language,
            "pages": self.pages,
            "publisher": self.publisher,
            "title": self.title,
            "year": self.year,
        }

    def to_row(self) -> tuple:
        """Values in column order, ready for a parameterized statement."""
        return tuple(getattr(self, name) for name in BOOK_FIELDS)

    @staticmethod
    def from_dict(data: dict) -> "Book":
        return Book(**{name: data[name] for name in BOOK_FIELDS})
