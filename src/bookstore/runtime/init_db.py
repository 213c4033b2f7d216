"""Database initialization script."""

from src.bookstore.core.services import DbManageService, DbSessionService


def init_db(database_service: DbSessionService | None = None) -> None:
    """Create the books table if it does not exist."""
    database_service = database_service or DbSessionService()
    database_service.connect()
    DbManageService(database_service.engine).create_all()


if __name__ == "__main__":
    init_db()
