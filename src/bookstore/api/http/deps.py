"""FastAPI dependency implementations."""

from fastapi import Request

from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.core.services import DbSessionService
from src.bookstore.entities.book import BookRepository


def get_database_service(request: Request) -> DbSessionService:
    """Get the connection pool owner."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_book_repository(request: Request) -> BookRepository:
    """Get the book repository bound to the application's pool."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.book_repository
