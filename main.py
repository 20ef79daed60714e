import subprocess
import sys
from typing import Optional

import typer
from pydantic import ValidationError

import database
from book import Book
from config import settings
from library import Library
from schemas import BookModel
from ui_helpers import set_output_mode, print_list_result, print_book_result

APP_NAME = "Bookstore CLI"

app = typer.Typer(help=APP_NAME)


def _get_library() -> Library:
    database.initialize_database()
    return Library()


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (e.g. output mode)."""
    if output:
        set_output_mode(output)


@app.command("init-db")
def cli_init_db():
    """Create the books table if it does not exist."""
    database.initialize_database()
    print(f"Database ready: {database.DATABASE_FILE}")


@app.command("list")
def cli_list():
    """List all books."""
    print_list_result(_get_library().list_books())


@app.command("find")
def cli_find(isbn: str):
    """Find a book by ISBN and show its details."""
    book = _get_library().find_book(isbn)
    if book:
        print_book_result(book)
    else:
        print(f"Book with ISBN {isbn} not found.")


@app.command("remove")
def cli_remove(isbn: str):
    """Remove a book by ISBN."""
    if _get_library().remove_book(isbn):
        print(f"Book with ISBN {isbn} has been removed.")
    else:
        print(f"Book with ISBN {isbn} not found.")


@app.command("load")
def cli_load(file_path: str = typer.Argument(..., help="JSON file with an array of books")):
    """Import books from a JSON file. Invalid records are skipped, existing ISBNs are kept."""
    try:
        records = database.read_books_json(file_path)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)

    books = []
    skipped = 0
    for record in records:
        try:
            books.append(Book(**BookModel.model_validate(record).model_dump()))
        except ValidationError:
            skipped += 1

    inserted = _get_library().import_books(books)
    print(f"Imported {inserted} books ({skipped} invalid, {len(books) - inserted} already present).")


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default from API_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", help="Port (default from API_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
):
    """Start the HTTP API with uvicorn."""
    host = host or settings.api_host
    port = port or settings.api_port
    print(f"Starting API on http://{host}:{port}")

    command = [sys.executable, "-m", "uvicorn", "api:app", "--host", host, "--port", str(port)]
    if reload:
        command.append("--reload")
    try:
        subprocess.run(command, check=False)
    except KeyboardInterrupt:
        print("Server stopped.")


if __name__ == "__main__":
    app()
