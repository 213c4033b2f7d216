from dataclasses import dataclass

from src.bookstore.core.services import DbSessionService
from src.bookstore.entities.book import BookRepository


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    book_repository: BookRepository
