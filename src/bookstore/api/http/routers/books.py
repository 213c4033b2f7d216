"""Book API router with CRUD operations."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from src.bookstore.api.http.deps import get_book_repository
from src.bookstore.entities.book import (
    Book,
    BookFields,
    BookRepository,
    parse_book_id,
    parse_year_filter,
)

router = APIRouter(prefix="/books", tags=["books"])


@router.get("", response_model=list[Book])
def list_books(
    year: str | None = Query(default=None),
    repository: BookRepository = Depends(get_book_repository),
) -> list[Book]:
    """List all books, optionally only those published in ``year``."""
    return repository.list_all(year=parse_year_filter(year))


@router.get("/{book_id}", response_model=Book)
def get_book(
    book_id: str,
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Get a book by ID."""
    return repository.get(parse_book_id(book_id))


@router.post("", response_model=Book, status_code=201)
def create_book(
    payload: Any = Body(...),
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Create a new book."""
    return repository.create(BookFields.from_payload(payload))


@router.put("/{book_id}", response_model=Book)
def update_book(
    book_id: str,
    payload: Any = Body(...),
    repository: BookRepository = Depends(get_book_repository),
) -> Book:
    """Replace every mutable field of a book."""
    fields = BookFields.from_payload(payload)
    return repository.update(parse_book_id(book_id), fields)


@router.delete("/{book_id}")
def delete_book(
    book_id: str,
    repository: BookRepository = Depends(get_book_repository),
) -> dict[str, str]:
    """Delete a book."""
    repository.delete(parse_book_id(book_id))
    return {"message": "book deleted successfully"}
