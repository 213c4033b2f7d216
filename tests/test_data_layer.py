"""Book repository tests against an in-memory SQLite backend.

Covers the record operations (create, get, list, update, delete), the
lifecycle guarantees of the store-assigned fields, and partial-result
tolerance when listing rows that cannot be decoded.
"""

import time

import pytest
from sqlalchemy import text

from src.bookstore.core.exceptions import BackendError, NotFoundError
from src.bookstore.entities.book import Book, BookFields
from src.bookstore.entities.book.repository import DecodeFailure, decode_rows


def make_fields(**overrides) -> BookFields:
    values = {
        "title": "Dune",
        "author": "Herbert",
        "isbn": "111",
        "year": 1965,
        "price": 9.99,
    }
    values.update(overrides)
    return BookFields(**values)


class TestCreateAndGet:
    def test_create_assigns_id_and_timestamps(self, repository, dune_fields):
        book = repository.create(dune_fields)

        assert isinstance(book, Book)
        assert book.id == 1
        assert book.title == "Dune"
        assert book.created_at is not None
        assert book.created_at == book.updated_at

    def test_get_after_create_returns_equal_record(self, repository, dune_fields):
        created = repository.create(dune_fields)

        assert repository.get(created.id) == created

    def test_ids_are_unique(self, repository):
        first = repository.create(make_fields(title="A"))
        second = repository.create(make_fields(title="B"))

        assert first.id != second.id

    def test_get_never_created_raises_not_found(self, repository):
        with pytest.raises(NotFoundError, match="book not found"):
            repository.get(999)

    def test_constraint_violation_is_backend_error(self, repository, database_service):
        """Store-level constraints surface as generic backend errors."""
        with pytest.raises(BackendError, match="NOT NULL"):
            with database_service.connection() as connection:
                connection.execute(
                    text(
                        "INSERT INTO books (title, author, isbn, year, price) "
                        "VALUES (NULL, 'x', 'x', 1, 1.0)"
                    )
                )


class TestListBooks:
    def test_empty_store_returns_empty_list(self, repository):
        books = repository.list_all()

        assert books == []
        assert isinstance(books, list)

    def test_list_returns_all_rows(self, repository):
        for year in (1965, 1966, 1965):
            repository.create(make_fields(year=year))

        assert len(repository.list_all()) == 3

    def test_year_filter_is_exact_subset(self, repository):
        for year in (1965, 1966, 1965, 2001):
            repository.create(make_fields(year=year))

        everything = repository.list_all()
        for year in (1965, 1966, 2001, 1800):
            filtered = repository.list_all(year=year)
            expected = [book for book in everything if book.year == year]
            assert sorted(b.id for b in filtered) == sorted(b.id for b in expected)

    def test_year_filter_without_matches_returns_empty_list(self, repository):
        repository.create(make_fields(year=1965))

        assert repository.list_all(year=1999) == []

    def test_undecodable_rows_are_skipped(self, repository, database_service):
        repository.create(make_fields(title="Good"))
        with database_service.connection() as connection:
            connection.execute(
                text(
                    "INSERT INTO books (title, author, isbn, year, price) "
                    "VALUES ('Bad', 'x', 'x', 'not-a-year', 1.0)"
                )
            )

        books = repository.list_all()

        assert [book.title for book in books] == ["Good"]


class TestDecodeRows:
    def test_records_failures_and_keeps_going(self):
        rows = [
            {"id": 1, "title": "A", "author": "a", "isbn": "1", "year": 1,
             "price": 1.0, "created_at": "2024-01-01T00:00:00",
             "updated_at": "2024-01-01T00:00:00"},
            {"id": 2, "title": None},
        ]
        failures: list[DecodeFailure] = []

        books = list(decode_rows(rows, failures))

        assert [book.id for book in books] == [1]
        assert [failure.row_id for failure in failures] == [2]


class TestUpdate:
    def test_update_replaces_fields_and_keeps_created_at(self, repository, dune_fields):
        created = repository.create(dune_fields)

        updated = repository.update(created.id, make_fields(year=1966, price=12.5))

        assert updated.id == created.id
        assert updated.year == 1966
        assert updated.price == pytest.approx(12.5)
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at
        assert repository.get(created.id) == updated

    def test_created_at_stable_across_many_updates(self, repository, dune_fields):
        created = repository.create(dune_fields)
        previous = created

        for year in range(1966, 1970):
            current = repository.update(created.id, make_fields(year=year))
            assert current.created_at == created.created_at
            assert current.updated_at >= previous.updated_at
            previous = current

    def test_update_missing_raises_not_found(self, repository, dune_fields):
        with pytest.raises(NotFoundError):
            repository.update(404, dune_fields)


class TestDelete:
    def test_delete_then_get_raises_not_found(self, repository, dune_fields):
        book = repository.create(dune_fields)

        repository.delete(book.id)

        with pytest.raises(NotFoundError):
            repository.get(book.id)

    def test_delete_missing_raises_not_found(self, repository):
        with pytest.raises(NotFoundError):
            repository.delete(1)

    def test_ids_are_not_reused_after_delete(self, repository, dune_fields):
        first = repository.create(dune_fields)
        repository.delete(first.id)

        second = repository.create(dune_fields)

        assert second.id > first.id


def test_dune_scenario(repository, dune_fields):
    """Create, update a year later, delete, then look the book up again."""
    created = repository.create(dune_fields)
    assert created.id == 1
    assert created.created_at == created.updated_at

    # SQLite CURRENT_TIMESTAMP has one-second resolution
    time.sleep(1.1)
    updated = repository.update(created.id, make_fields(year=1966))
    assert updated.updated_at > created.updated_at
    assert updated.created_at == created.created_at
    assert updated.year == 1966

    repository.delete(created.id)
    with pytest.raises(NotFoundError):
        repository.get(created.id)
