"""Data-access layer for books."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from loguru import logger
from pydantic import ValidationError
from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.engine import RowMapping

from src.bookstore.core.exceptions import BackendError, NotFoundError
from src.bookstore.core.services.database.db_session import DbSessionService

from .entity import Book, BookFields
from .table import books_table

BOOK_NOT_FOUND = "book not found"


@dataclass(frozen=True)
class DecodeFailure:
    """A row that was read from the store but could not become a Book."""

    row_id: Any
    error: str


def decode_rows(
    rows: Iterable[RowMapping], failures: list[DecodeFailure] | None = None
) -> Iterator[Book]:
    """Lazily decode rows, skipping (and recording) those that do not fit."""
    for row in rows:
        try:
            yield Book.model_validate(dict(row))
        except ValidationError as e:
            failure = DecodeFailure(row_id=row.get("id"), error=str(e))
            logger.warning("error scanning book {}: {}", failure.row_id, e.errors())
            if failures is not None:
                failures.append(failure)


class BookRepository:
    """Record operations on the ``books`` table.

    Every operation checks a connection out of the pool for its duration and
    hands it back on all exit paths. Store failures surface as BackendError.
    """

    def __init__(self, database: DbSessionService) -> None:
        self._database = database

    def list_all(self, year: int | None = None) -> list[Book]:
        """Return every book, or only those published in ``year``."""
        statement = select(*books_table.c)
        if year is not None:
            statement = statement.where(books_table.c.year == year)

        failures: list[DecodeFailure] = []
        with self._database.connection() as connection:
            rows = connection.execute(statement).mappings()
            books = list(decode_rows(rows, failures))

        if failures:
            logger.warning(
                "Listed {} books, skipped {} undecodable rows", len(books), len(failures)
            )
        return books

    def get(self, book_id: int) -> Book:
        statement = select(*books_table.c).where(books_table.c.id == book_id)
        with self._database.connection() as connection:
            row = connection.execute(statement).mappings().first()

        if row is None:
            raise NotFoundError(BOOK_NOT_FOUND)
        return self._to_entity(row)

    def create(self, fields: BookFields) -> Book:
        """Insert a book; id and timestamps come back in the same round trip."""
        statement = (
            insert(books_table)
            .values(**fields.model_dump())
            .returning(*books_table.c)
        )
        with self._database.connection() as connection:
            row = connection.execute(statement).mappings().one()

        book = self._to_entity(row)
        logger.info("Created book {}", book.id)
        return book

    def update(self, book_id: int, fields: BookFields) -> Book:
        """Replace the mutable fields of a book and refresh ``updated_at``."""
        statement = (
            update(books_table)
            .where(books_table.c.id == book_id)
            .values(**fields.model_dump(), updated_at=func.now())
            .returning(*books_table.c)
        )
        with self._database.connection() as connection:
            row = connection.execute(statement).mappings().first()

        if row is None:
            raise NotFoundError(BOOK_NOT_FOUND)
        book = self._to_entity(row)
        logger.info("Updated book {}", book.id)
        return book

    def delete(self, book_id: int) -> None:
        statement = delete(books_table).where(books_table.c.id == book_id)
        with self._database.connection() as connection:
            deleted = connection.execute(statement).rowcount

        if deleted == 0:
            raise NotFoundError(BOOK_NOT_FOUND)
        logger.info("Deleted book {}", book_id)

    @staticmethod
    def _to_entity(row: RowMapping) -> Book:
        try:
            return Book.model_validate(dict(row))
        except ValidationError as e:
            raise BackendError(f"could not decode book row {row.get('id')}: {e}") from e
