from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.engine import Engine

from src.bookstore.core.services import DbManageService, DbSessionService
from src.bookstore.entities.book import BookFields, BookRepository

__all__ = [
    "engine",
    "database_service",
    "unreachable_database_service",
    "repository",
    "dune_fields",
    "client",
]


@pytest.fixture
def engine() -> Generator[Engine]:
    """In-memory SQLite engine standing in for PostgreSQL; fresh per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    DbManageService(engine).create_all()
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def database_service(engine: Engine) -> DbSessionService:
    return DbSessionService(engine=engine)


@pytest.fixture
def unreachable_database_service(tmp_path) -> DbSessionService:
    """A pool whose backend cannot be opened."""
    missing = tmp_path / "missing-dir" / "books.db"
    return DbSessionService(engine=create_engine(f"sqlite:///{missing}"))


@pytest.fixture
def repository(database_service: DbSessionService) -> BookRepository:
    return BookRepository(database_service)


@pytest.fixture
def dune_fields() -> BookFields:
    return BookFields(
        title="Dune", author="Herbert", isbn="111", year=1965, price=9.99
    )


@pytest.fixture
def client(database_service: DbSessionService) -> Generator[TestClient]:
    """Test client running the full application against the SQLite pool."""
    from src.bookstore.api.http.app import create_app

    with TestClient(create_app(database_service=database_service)) as client:
        yield client
