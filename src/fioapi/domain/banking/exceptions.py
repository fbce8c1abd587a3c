"""Banking exceptions: the closed error taxonomy of the Fio client.

One class per FioErrorKind. HTTP outcomes derive from FioApiError and carry
the status code plus an optional reason text extracted from the response
body. Payload failures derive from ParseError. None of them ever carry the
API token.
"""

from __future__ import annotations

from typing import ClassVar

from fioapi.domain.shared.exceptions import FioError, FioErrorKind

# =============================================================================
# HTTP Status Exceptions
# =============================================================================


class FioApiError(FioError):
    """Base exception for non-2xx responses from the bank."""

    default_message: ClassVar[str] = "Bank rejected the request"

    def __init__(
        self,
        status_code: int,
        reason: str | None = None,
        message: str | None = None,
    ) -> None:
        text = message or f"{self.default_message} (HTTP {status_code})"
        if reason:
            text = f"{text}: {reason}"
        super().__init__(
            message=text,
            details={"status_code": status_code, "reason": reason},
        )
        self.status_code = status_code
        self.reason = reason


class UnauthorizedError(FioApiError):
    """Raised when the token is invalid, revoked or lacks permission."""

    kind = FioErrorKind.UNAUTHORIZED
    default_message = "Not authorized, check the API token"


class RateLimitedError(FioApiError):
    """Raised when a request came too soon after the previous one.

    The bank allows one request per token every 30 seconds.
    """

    kind = FioErrorKind.RATE_LIMITED
    default_message = "Request limit exceeded, wait before retrying"


class NotFoundError(FioApiError):
    """Raised when the bank rejects the requested range or account.

    This is not an empty report: an empty but valid range is a 200 with an
    empty transaction list.
    """

    kind = FioErrorKind.NOT_FOUND
    default_message = "Requested data not found"


class TooManyItemsError(FioApiError):
    """Raised when the report would exceed the bank's item limit."""

    kind = FioErrorKind.TOO_MANY_ITEMS
    default_message = "Too many items requested, narrow the range"


class ServerError(FioApiError):
    """Raised for 5xx responses."""

    kind = FioErrorKind.SERVER_ERROR
    default_message = "Bank server error"


class UnexpectedStatusError(FioApiError):
    """Raised for any other non-2xx status."""

    kind = FioErrorKind.UNEXPECTED_STATUS
    default_message = "Unexpected response status"


# =============================================================================
# Transport Exceptions
# =============================================================================


class TransportError(FioError):
    """Raised when the request failed below HTTP (connection, timeout)."""

    kind = FioErrorKind.TRANSPORT

    def __init__(
        self,
        message: str = "Failed to reach the bank",
        reason: str | None = None,
    ) -> None:
        super().__init__(
            message=f"{message}: {reason}" if reason else message,
            details={"reason": reason} if reason else None,
        )
        self.reason = reason


# =============================================================================
# Parse Exceptions
# =============================================================================


class ParseError(FioError):
    """Base exception for payloads that could not be decoded."""


class UnsupportedFormatError(ParseError):
    """Raised when a format tag is unknown or not valid for the operation.

    The parser raises it for anything other than structured json; the
    client raises it before sending a request it cannot address.
    """

    kind = FioErrorKind.UNSUPPORTED_FORMAT

    def __init__(self, fmt: str, message: str | None = None) -> None:
        if message is None:
            message = f"Format '{fmt}' cannot be parsed, only json is supported"
        super().__init__(
            message=message,
            details={"format": fmt},
        )
        self.fmt = fmt


class MalformedFieldError(ParseError):
    """Raised when a required field is missing or malformed."""

    kind = FioErrorKind.MALFORMED_FIELD

    def __init__(self, column: str, reason: str) -> None:
        super().__init__(
            message=f"Malformed field '{column}': {reason}",
            details={"column": column, "reason": reason},
        )
        self.column = column
        self.reason = reason


# =============================================================================
# Request Validation Exceptions
# =============================================================================


class InvalidRequestError(FioError):
    """Raised when arguments are rejected before any request is sent."""

    kind = FioErrorKind.INVALID_REQUEST

    def __init__(self, reason: str) -> None:
        super().__init__(
            message=f"Invalid request: {reason}",
            details={"reason": reason},
        )
        self.reason = reason
