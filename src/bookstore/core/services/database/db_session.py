"""Database engine and connection pool shared by the record operations."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from src.bookstore.core.exceptions import BackendError, StartupError
from src.bookstore.runtime.config.config_data import DatabaseConfig
from src.bookstore.runtime.context import get_config


def describe_error(error: SQLAlchemyError) -> str:
    """Return the driver's diagnostic text without SQLAlchemy's wrapping."""
    if isinstance(error, DBAPIError) and error.orig is not None:
        return str(error.orig).strip()
    return str(error)


@dataclass(frozen=True)
class HealthStatus:
    healthy: bool
    error: str | None = None


class DbSessionService:
    """Owns the bounded connection pool to the backing store.

    The pool keeps at most ``max_idle_conns`` connections ready for reuse and
    opens overflow connections up to ``max_open_conns``. Connections older
    than ``conn_max_lifetime`` seconds are recycled on checkout.
    """

    def __init__(
        self,
        db_config: DatabaseConfig | None = None,
        engine: Engine | None = None,
    ) -> None:
        main_config = get_config()
        self._db_config = db_config or main_config.database

        if engine is not None:
            logger.info("Using injected database engine: {}", engine.url)
            self._engine = engine
            return

        logger.info("Setting up database engine for environment: {}", main_config.app.environment)
        engine_kwargs = self._get_engine_kwargs(self._db_config, main_config.app.environment)

        try:
            url = self._db_config.url
        except ValueError as e:
            raise StartupError(f"invalid database configuration: {e}") from e

        logger.info(
            "Initializing database engine using connection string: {} and pool {}",
            url.render_as_string(hide_password=True),
            {k: v for k, v in engine_kwargs.items() if k.startswith("pool") or k == "max_overflow"},
        )
        self._engine = create_engine(url, **engine_kwargs)

    @staticmethod
    def _get_engine_kwargs(db_config: DatabaseConfig, environment: str) -> dict[str, Any]:
        """Translate the pool limits into QueuePool arguments."""
        return {
            # Idle connections kept for reuse; overflow fills up to the open cap
            "pool_size": db_config.max_idle_conns,
            "max_overflow": db_config.max_open_conns - db_config.max_idle_conns,
            "pool_timeout": db_config.pool_timeout,
            "pool_recycle": db_config.conn_max_lifetime,
            "pool_pre_ping": True,
            "pool_reset_on_return": "rollback",
            "echo": False,
            "echo_pool": False,
            "connect_args": DbSessionService._get_connect_args(db_config, environment),
        }

    @staticmethod
    def _get_connect_args(db_config: DatabaseConfig, environment: str) -> dict[str, Any]:
        """Driver-specific connection arguments; only libpq understands these."""
        if "postgresql" not in db_config.driver:
            return {}
        return {
            # Application name for connection tracking
            "application_name": f"{environment}_bookstore",
            "connect_timeout": 30,
        }

    @property
    def engine(self) -> Engine:
        return self._engine

    def connect(self) -> None:
        """Perform the initial handshake with the backend.

        Raises:
            StartupError: if the database cannot be reached. There is no retry.
        """
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(
                "Failed to connect to database",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": describe_error(e),
                },
            )
            raise StartupError(f"failed to connect to database: {describe_error(e)}") from e

        logger.info("Successfully connected to database")

    @contextmanager
    def connection(self) -> Iterator[Connection]:
        """Check out a pooled connection for the duration of one operation.

        The surrounding transaction is committed when the block exits normally
        and rolled back otherwise; the connection always returns to the pool.
        Store failures are re-raised as BackendError.
        """
        try:
            with self._engine.begin() as connection:
                yield connection
        except SQLAlchemyError as e:
            logger.error(
                "Database operation failed",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": describe_error(e),
                },
            )
            raise BackendError(describe_error(e)) from e

    def ping(self) -> HealthStatus:
        """Liveness probe; never raises for backend failures."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return HealthStatus(healthy=True)
        except SQLAlchemyError as e:
            logger.error(
                "Database health check failed",
                extra={
                    "error_type": type(e).__name__,
                    "error_message": describe_error(e),
                },
            )
            return HealthStatus(healthy=False, error=describe_error(e))

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring."""
        pool = self._engine.pool
        return {
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_in": getattr(pool, "checkedin", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }

    def dispose(self) -> None:
        """Close every pooled connection."""
        logger.info("Disposing database connection pool")
        self._engine.dispose()
