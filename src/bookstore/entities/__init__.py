"""Entities module with an entity-centric structure.

Each entity has its own package containing:
- entity.py: Domain model and input parsing
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .book import Book, BookFields, BookRepository, BookTable

__all__ = [
    "Book",
    "BookFields",
    "BookRepository",
    "BookTable",
]
