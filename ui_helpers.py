import os
import json
from typing import List, Any
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOKSTORE_CLI_OUTPUT"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    # Unknown values keep the current mode
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def print_list_result(books: List[Any]) -> None:
    """Print a list of books in the current output mode.
    - plain: 'ISBN - Title by Author' lines, or 'No books in library.'
    - json: JSON array of full book records
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No books in library.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Year", justify="right")
        for b in books:
            table.add_row(b.isbn, b.title or "", b.author or "", str(b.year or ""))
        _console.print(table)
    else:
        for b in books:
            print(f"{b.isbn} - {b.title} by {b.author}")

def print_book_result(book: Any) -> None:
    """Print a single book's details in the current output mode."""
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps(book.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        content = "\n".join(f"[bold]{key}:[/] {value}" for key, value in book.to_dict().items())
        _console.print(Panel.fit(content, title="📖 Book Found", border_style="blue"))
    else:
        print("Book Found")
        print(f"Title: {book.title}")
        print(f"Author: {book.author}")
        print(f"ISBN: {book.isbn}")
        print(f"Publisher: {book.publisher}")
        print(f"Language: {book.language}")
        print(f"Pages: {book.pages}")
        print(f"Year: {book.year}")
        print(f"Amazon: {book.amazon_url}")
