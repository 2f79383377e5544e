"""
Errors raised by IngestClient. Every failed call raises exactly one of these.

ConnectFailed says nothing about whether the service received the request.
The other errors are answers from the service.
"""

from typing import Optional


class IngestError(Exception):
    pass


class MalformedUrl(IngestError):
    """Base URL (or a URL built from it) is not a usable http(s) URL."""

    pass


class ConnectFailed(IngestError):
    """Transport failure: DNS, refused connection, timeout."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"Failed to connect to ingest service: {cause}")
        self.cause = cause


class DataPointAlreadyExists(IngestError):
    """409: a point with this timestamp is already stored. Treat as already ingested."""

    def __init__(self, message: str = "Data point already exists") -> None:
        super().__init__(message)


class Unauthorized(IngestError):
    """401/403: bad credentials, or the identity does not own the series."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class Failed(IngestError):
    """Any other non-success answer, or an unreadable response body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFound(Failed):
    pass
