import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from book import Book
from config import settings
from database import get_db_connection, initialize_database
from library import Library
from schemas import (
    BookListResponse,
    BookModel,
    BookResponse,
    BookUpdateModel,
    HealthResponse,
    MessageResponse,
)

# Configure logging
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

library = Library()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Make sure the books table exists before serving requests
    initialize_database()
    yield


app = FastAPI(title=settings.app_name, version=settings.app_version, debug=settings.debug, lifespan=lifespan)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error handlers ---
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Schema mismatches are client errors: answer 400 instead of FastAPI's default 422."""
    errors = jsonable_encoder(exc.errors())
    logger.info(f"Rejected {request.method} {request.url.path}: {len(errors)} validation error(s)")
    return JSONResponse(status_code=400, content={"detail": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def _not_found(isbn: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"There is no book with an isbn '{isbn}'")


# --- Health check ---
@app.get("/health", response_model=HealthResponse)
def health():
    """Lightweight health endpoint: a quick database round trip plus the book count."""
    db_ok = True
    total_books = 0
    try:
        conn = get_db_connection()
        try:
            conn.execute("SELECT 1")
        finally:
            conn.close()
        total_books = library.count_books()
    except Exception:
        logger.warning("Health check could not reach the database", exc_info=True)
        db_ok = False
    return {
        "status": "healthy" if db_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "db": db_ok,
        "total_books": total_books,
    }


# --- Books ---
@app.get("/books", response_model=BookListResponse)
def list_books():
    """All books, ordered by title."""
    return {"books": [book.to_dict() for book in library.list_books()]}


@app.get("/books/{isbn}", response_model=BookResponse)
def get_book(isbn: str):
    book = library.find_book(isbn)
    if not book:
        raise _not_found(isbn)
    return {"book": book.to_dict()}


@app.post("/books", response_model=BookResponse, status_code=201)
def create_book(payload: BookModel):
    try:
        book = library.add_book(Book(**payload.model_dump()))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"book": book.to_dict()}


@app.put("/books/{isbn}", response_model=BookResponse)
def update_book(isbn: str, payload: BookUpdateModel):
    """Replace a book's fields. The isbn itself cannot change."""
    if payload.isbn is not None and payload.isbn != isbn:
        raise HTTPException(status_code=400, detail="ISBN in the request body does not match the URL.")

    book = library.update_book(isbn, payload.model_dump(exclude={"isbn"}))
    if not book:
        raise _not_found(isbn)
    return {"book": book.to_dict()}


@app.delete("/books/{isbn}", response_model=MessageResponse)
def delete_book(isbn: str):
    if not library.remove_book(isbn):
        raise _not_found(isbn)
    return {"message": "Book deleted"}
