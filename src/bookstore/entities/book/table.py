"""Book database table model."""

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


class BookTable(SQLModel, table=True):
    """Database persistence model for books.

    ``id`` and both timestamps are assigned by the database. The table is
    declared with AUTOINCREMENT on SQLite so ids are never reused after a
    delete; PostgreSQL sequences already behave that way.
    """

    __tablename__ = "books"
    __table_args__ = {"sqlite_autoincrement": True}

    id: int | None = Field(default=None, primary_key=True)
    title: str
    author: str
    isbn: str
    year: int = Field(index=True)
    price: float

    created_at: datetime | None = Field(
        default=None,
        sa_column=sa.Column(
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=sa.Column(
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )


books_table: sa.Table = BookTable.__table__  # type: ignore[attr-defined]
