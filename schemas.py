"""
Pydantic schemas for the books API.

``BookModel`` is the create schema: every field is required and unknown
fields are rejected. ``BookUpdateModel`` carries the same full set of fields
minus the isbn, which comes from the URL. Both validate strictly, so a JSON
string such as ``"300"`` is not accepted where an integer is expected.
Isbns may not contain whitespace, and integers must fit a 64-bit SQLite
INTEGER column.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

ISBN_PATTERN = r"^\S+$"
SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1


class BookModel(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    isbn: str = Field(min_length=1, pattern=ISBN_PATTERN)
    amazon_url: str = Field(min_length=1)
    author: str = Field(min_length=1)
    language: str = Field(min_length=1)
    pages: int = Field(ge=0, le=SQLITE_INT_MAX)
    publisher: str = Field(min_length=1)
    title: str = Field(min_length=1)
    year: int = Field(ge=SQLITE_INT_MIN, le=SQLITE_INT_MAX)


class BookUpdateModel(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    # Optional; when present it must match the isbn in the URL.
    isbn: Optional[str] = Field(default=None, min_length=1, pattern=ISBN_PATTERN)
    amazon_url: str = Field(min_length=1)
    author: str = Field(min_length=1)
    language: str = Field(min_length=1)
    pages: int = Field(ge=0, le=SQLITE_INT_MAX)
    publisher: str = Field(min_length=1)
    title: str = Field(min_length=1)
    year: int = Field(ge=SQLITE_INT_MIN, le=SQLITE_INT_MAX)


class BookOut(BaseModel):
    isbn: str
    amazon_url: Optional[str] = None
    author: Optional[str] = None
    language: Optional[str] = None
    pages: Optional[int] = None
    publisher: Optional[str] = None
    title: Optional[str] = None
    year: Optional[int] = None


class BookResponse(BaseModel):
    book: BookOut


class BookListResponse(BaseModel):
    books: List[BookOut]


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    db: bool
    total_books: int
