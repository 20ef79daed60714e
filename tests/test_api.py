"""Integration tests for the books routes."""

import sqlite3

import pytest
from fastapi.testclient import TestClient

from api import app
from library import Library


UPDATE_PAYLOAD = {
    "amazon_url": "https://amazon.com/taco",
    "author": "Taco Man",
    "language": "English",
    "pages": 300,
    "publisher": "Taco Publisher",
    "title": "The First Taco Born",
    "year": 2022,
}


@pytest.fixture
def client(db_file):
    with TestClient(app) as test_client:
        yield test_client


# --- GET /books ---
def test_get_books(client, sample_book):
    response = client.get("/books")
    assert response.status_code == 200
    books = response.json()["books"]
    assert len(books) == 1
    assert books[0] == sample_book.to_dict()


def test_get_books_empty(client):
    response = client.get("/books")
    assert response.status_code == 200
    assert response.json() == {"books": []}


# --- GET /books/{isbn} ---
def test_get_book(client, sample_book):
    response = client.get(f"/books/{sample_book.isbn}")
    assert response.status_code == 200
    assert response.json()["book"]["isbn"] == sample_book.isbn
    assert response.json()["book"]["pages"] == 250


def test_get_book_not_found(client, sample_book):
    response = client.get("/books/7654321")
    assert response.status_code == 404
    assert response.json()["detail"] == "There is no book with an isbn '7654321'"


# --- POST /books ---
def test_create_book(client):
    payload = {
        "isbn": "345678",
        "amazon_url": "https://amazon.com/burrito",
        "author": "Burrito Man",
        "language": "English",
        "pages": 400,
        "publisher": "Burrito Publisher",
        "title": "The Last Burrito Standing",
        "year": 2020,
    }
    response = client.post("/books", json=payload)
    assert response.status_code == 201
    assert response.json()["book"] == payload

    assert client.get("/books/345678").status_code == 200


def test_create_invalid_book(client):
    response = client.post("/books", json={"author": "Taco Man"})
    assert response.status_code == 400
    missing = {error["loc"][-1] for error in response.json()["detail"]}
    assert {"isbn", "title", "pages", "year"} <= missing


def test_create_book_rejects_string_pages(client, sample_book):
    payload = {**sample_book.to_dict(), "isbn": "999", "pages": "300"}
    response = client.post("/books", json=payload)
    assert response.status_code == 400


def test_create_book_rejects_unknown_field(client, sample_book):
    payload = {**sample_book.to_dict(), "isbn": "999", "random": "RANDOM FIELD"}
    response = client.post("/books", json=payload)
    assert response.status_code == 400


def test_create_duplicate_isbn(client, sample_book):
    response = client.post("/books", json=sample_book.to_dict())
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


@pytest.mark.parametrize("isbn", ["   ", " 123 ", "12 34", ""])
def test_create_book_rejects_blank_or_padded_isbn(client, sample_book, isbn):
    payload = {**sample_book.to_dict(), "isbn": isbn}
    response = client.post("/books", json=payload)
    assert response.status_code == 400
    assert client.get("/books").json()["books"] == [sample_book.to_dict()]


def test_create_book_rejects_integers_too_large_for_sqlite(client, sample_book):
    payload = {**sample_book.to_dict(), "isbn": "9", "pages": 10**20}
    assert client.post("/books", json=payload).status_code == 400

    payload = {**sample_book.to_dict(), "isbn": "9", "year": -(10**20)}
    assert client.post("/books", json=payload).status_code == 400
    assert client.get("/books/9").status_code == 404


# --- PUT /books/{isbn} ---
def test_update_book(client, sample_book):
    response = client.put(f"/books/{sample_book.isbn}", json=UPDATE_PAYLOAD)
    assert response.status_code == 200
    book = response.json()["book"]
    assert book["isbn"] == sample_book.isbn
    assert book["title"] == "The First Taco Born"

    stored = client.get(f"/books/{sample_book.isbn}").json()["book"]
    assert stored == {"isbn": sample_book.isbn, **UPDATE_PAYLOAD}


def test_update_book_with_matching_isbn_in_body(client, sample_book):
    payload = {**UPDATE_PAYLOAD, "isbn": sample_book.isbn}
    response = client.put(f"/books/{sample_book.isbn}", json=payload)
    assert response.status_code == 200


def test_update_book_with_different_isbn_in_body(client, sample_book):
    payload = {**UPDATE_PAYLOAD, "isbn": "9999999"}
    response = client.put(f"/books/{sample_book.isbn}", json=payload)
    assert response.status_code == 400
    assert client.get(f"/books/{sample_book.isbn}").json()["book"]["title"] == "The Test Book"


def test_bad_update(client, sample_book):
    payload = {
        "author": "Taco Man",
        "language": "English",
        "random": "RANDOM FIELD",
        "pages": "300",
        "publisher": "Taco Publisher",
        "title": "The First Taco Born",
        "year": 2022,
    }
    response = client.put(f"/books/{sample_book.isbn}", json=payload)
    assert response.status_code == 400


def test_update_rejects_unknown_field_only(client, sample_book):
    payload = {**UPDATE_PAYLOAD, "random": "RANDOM FIELD"}
    response = client.put(f"/books/{sample_book.isbn}", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"][0]["type"] == "extra_forbidden"


def test_update_requires_full_record(client, sample_book):
    response = client.put(f"/books/{sample_book.isbn}", json={"title": "Only a title"})
    assert response.status_code == 400


def test_update_book_not_found(client, sample_book):
    response = client.put("/books/000", json=UPDATE_PAYLOAD)
    assert response.status_code == 404


def test_update_rejects_integers_too_large_for_sqlite(client, sample_book):
    response = client.put(f"/books/{sample_book.isbn}", json={**UPDATE_PAYLOAD, "pages": 10**20})
    assert response.status_code == 400
    assert client.get(f"/books/{sample_book.isbn}").json()["book"]["pages"] == 250


def test_update_rejects_padded_isbn_in_body(client, sample_book):
    payload = {**UPDATE_PAYLOAD, "isbn": f" {sample_book.isbn} "}
    response = client.put(f"/books/{sample_book.isbn}", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"][0]["loc"] == ["body", "isbn"]


# --- DELETE /books/{isbn} ---
def test_delete_book(client, sample_book):
    response = client.delete(f"/books/{sample_book.isbn}")
    assert response.status_code == 200
    assert response.json() == {"message": "Book deleted"}
    assert client.get(f"/books/{sample_book.isbn}").status_code == 404


def test_delete_book_not_found(client, sample_book):
    response = client.delete("/books/000")
    assert response.status_code == 404


# --- Misc ---
def test_health(client, sample_book):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["db"] is True
    assert body["total_books"] == 1


def test_health_reports_degraded_database(client, monkeypatch):
    def broken(self):
        raise sqlite3.OperationalError("unable to open database file")

    monkeypatch.setattr(Library, "count_books", broken)
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "degraded"
    assert body["db"] is False
    assert body["total_books"] == 0


def test_unexpected_error_returns_500(db_file, monkeypatch):
    def broken(self):
        raise sqlite3.OperationalError("no such table: books")

    monkeypatch.setattr(Library, "list_books", broken)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.get("/books")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
