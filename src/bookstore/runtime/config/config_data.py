"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.engine import URL


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default="logs/app.log", description="Log file path")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database connection and pool configuration model."""

    driver: str = Field(
        default="postgresql+psycopg2", description="SQLAlchemy driver name"
    )
    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    name: str = Field(default="bookstore", description="Database name")
    user: str = Field(default="bookstore_user", description="Database username")
    password: str | None = Field(
        default=None,
        description="Database password, usually substituted from DB_PASSWORD",
    )
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )
    sslmode: str = Field(default="disable", description="libpq sslmode")

    max_open_conns: int = Field(
        default=25, ge=1, description="Maximum number of open connections"
    )
    max_idle_conns: int = Field(
        default=20, ge=0, description="Maximum number of idle connections kept"
    )
    conn_max_lifetime: int = Field(
        default=300, ge=1, description="Connection lifetime in seconds"
    )
    pool_timeout: float | None = Field(
        default=None,
        description="Seconds to wait for a free connection (None waits indefinitely)",
    )

    @model_validator(mode="after")
    def _check_pool_limits(self) -> DatabaseConfig:
        if self.max_idle_conns > self.max_open_conns:
            logger.warning(
                "max_idle_conns ({}) exceeds max_open_conns ({}); clamping",
                self.max_idle_conns,
                self.max_open_conns,
            )
            self.max_idle_conns = self.max_open_conns
        return self

    def resolve_password(self) -> str | None:
        """
        Get the database password from the appropriate source.
        1. A password file, when configured (mounted secrets)
        2. The substituted password value (DB_PASSWORD)
        There is no built-in fallback credential.
        """
        if self.password_file:
            try:
                with open(self.password_file) as f:
                    return f.read().strip()
            except OSError as e:
                raise ValueError(
                    "Failed to read database password from file."
                ) from e
        return self.password or None

    @property
    def connection_string(self) -> str:
        """Connection URL safe for logging."""
        return self.url.render_as_string(hide_password=True)

    @property
    def url(self) -> URL:
        """Build the SQLAlchemy URL for the configured backend."""
        return URL.create(
            self.driver,
            username=self.user,
            password=self.resolve_password(),
            host=self.host,
            port=self.port,
            database=self.name,
            query={"sslmode": self.sslmode} if "postgresql" in self.driver else {},
        )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="Application host")
    port: int = Field(default=8080, description="Application port")
    api_prefix: str = Field(default="/api/v1", description="Prefix for book routes")


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    app: AppConfig = Field(
        default_factory=AppConfig, description="Application configuration"
    )
