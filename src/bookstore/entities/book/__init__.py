"""Entity package: Book."""

from .entity import Book, BookFields, parse_book_id, parse_year_filter
from .repository import BookRepository
from .table import BookTable, books_table

__all__ = [
    "Book",
    "BookFields",
    "BookRepository",
    "BookTable",
    "books_table",
    "parse_book_id",
    "parse_year_filter",
]
