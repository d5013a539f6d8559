"""
Error kinds raised by the persistence layer.

Callers branch on the exception class rather than on message text. Where a
driver exception caused the failure it is chained as ``__cause__``.
"""


class RepositoryError(Exception):
    """Base class for every error raised by rebank."""


class DatabaseConnectionError(RepositoryError):
    """The database could not be reached or failed its liveness check."""


class SchemaError(RepositoryError):
    """Creating the account table failed."""


class WriteError(RepositoryError):
    """An INSERT or DELETE statement failed to execute."""


class ReadError(RepositoryError):
    """A SELECT statement failed to execute."""


class MappingError(RepositoryError):
    """A row could not be converted into an Account."""


class NotFoundError(RepositoryError):
    """A lookup matched no row."""

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"account with {field} {value!r} not found")
