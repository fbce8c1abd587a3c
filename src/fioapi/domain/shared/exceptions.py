"""Shared exception base and the closed error-kind taxonomy.

Every failure the client surfaces is a FioError subclass whose ``kind`` is
one member of FioErrorKind. Callers can either catch the concrete classes or
catch FioError and branch on ``kind``.
"""

from enum import Enum
from typing import Any, ClassVar


class FioErrorKind(str, Enum):
    """Stable error kinds for calling code.

    These values are part of the public contract. Should not be changed.
    """

    # HTTP status outcomes
    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"
    NOT_FOUND = "NOT_FOUND"
    TOO_MANY_ITEMS = "TOO_MANY_ITEMS"
    SERVER_ERROR = "SERVER_ERROR"
    UNEXPECTED_STATUS = "UNEXPECTED_STATUS"

    # Below HTTP
    TRANSPORT = "TRANSPORT"

    # Payload decoding
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    MALFORMED_FIELD = "MALFORMED_FIELD"

    # Rejected before any request was sent
    INVALID_REQUEST = "INVALID_REQUEST"


class FioError(Exception):
    """Base exception for all client errors.

    Attributes
    ----------
    message
        Human-readable error message (never contains the API token)
    kind
        Closed error kind for programmatic handling
    details
        Optional additional context
    """

    kind: ClassVar[FioErrorKind]

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"kind={self.kind.value!r}, "
            f"details={self.details!r})"
        )
