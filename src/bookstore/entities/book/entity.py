"""Entity: Book."""

import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.bookstore.core.exceptions import InvalidInputError

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")

# Ids are 64-bit signed integers; anything wider cannot name a stored row
_ID_MIN, _ID_MAX = -(2**63), 2**63 - 1


def _summarize(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "body"
        parts.append(f"{location}: {detail['msg']}")
    return "; ".join(parts)


class BookFields(BaseModel):
    """The caller-supplied, mutable part of a book.

    Unknown keys are ignored, so a payload carrying ``id`` or timestamps
    cannot override what the store assigns. Values are not coerced: a
    boolean or string where a number belongs is rejected.
    """

    model_config = ConfigDict(extra="ignore")

    title: str = Field(strict=True, description="Title")
    author: str = Field(strict=True, description="Author")
    isbn: str = Field(strict=True, description="ISBN, not required to be unique")
    year: int = Field(strict=True, description="Publication year")
    # Strict float still takes JSON integers such as 10
    price: float = Field(strict=True, description="Price")

    @classmethod
    def from_payload(cls, payload: Any) -> "BookFields":
        """Decode an inbound payload, raising InvalidInputError on failure."""
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise InvalidInputError(_summarize(e)) from e


class Book(BookFields):
    """A stored book, including the fields assigned by the store."""

    id: int = Field(description="Store-assigned identifier")
    created_at: datetime = Field(description="Set once at insertion")
    updated_at: datetime = Field(description="Set at insertion and on every update")


def parse_book_id(raw: str | int) -> int:
    """Parse a path parameter into a book id.

    Any integer is accepted; ids that were never assigned, such as ``0`` or
    negative values, are left for the store to report as not found.
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        book_id = raw
    elif isinstance(raw, str) and _INTEGER_PATTERN.fullmatch(raw.strip()):
        book_id = int(raw.strip())
    else:
        raise InvalidInputError("Invalid ID format")

    if not _ID_MIN <= book_id <= _ID_MAX:
        raise InvalidInputError("Invalid ID format")
    return book_id


def parse_year_filter(raw: str | int | None) -> int | None:
    """Parse the optional ``year`` filter; empty means no filter."""
    if raw is None:
        return None
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return None
        if _INTEGER_PATTERN.fullmatch(raw):
            return int(raw)
    raise InvalidInputError("Invalid year format")
