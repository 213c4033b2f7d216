"""Error kinds raised by the book store."""


class BookStoreError(Exception):
    """Base class for every failure reported by the store."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(BookStoreError):
    """Raised when an operation targets an id with no matching row."""

    kind = "not_found"


class InvalidInputError(BookStoreError):
    """Raised when a payload, id or filter cannot be decoded."""

    kind = "validation_error"


class BackendError(BookStoreError):
    """Raised for any failure surfaced by the database.

    Carries the driver's own diagnostic text.
    """

    kind = "backend_error"


class StartupError(BookStoreError):
    """Raised when the initial connection to the database cannot be established."""

    kind = "startup_error"
