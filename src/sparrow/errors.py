"""Sparrow exception hierarchy.

Shared across the router, app, dispatcher, and data layer so every module
raises and catches the same types.
"""


class SparrowError(Exception):
    """Base for all sparrow-specific errors."""


class ConfigurationError(SparrowError):
    """Raised when app or database configuration is invalid."""


class DatabaseNotConfigured(ConfigurationError):  # noqa: N818
    """Raised when a query is attempted before ``app.database()`` was called."""

    def __init__(self, detail: str = "Database not configured. Use app.database() first.") -> None:
        super().__init__(detail)


class ResponseAlreadySent(SparrowError):  # noqa: N818
    """Raised when ``json()`` or ``send()`` is called on a finished response."""


class ClientDisconnect(SparrowError):  # noqa: N818
    """Raised when the client goes away while the request body is being read."""
