"""Error mapper - classifies transport and HTTP outcomes.

STATUS_KINDS is the only place that knows which bank status code means
what. Supporting a new bank status means adding a row here, never touching
call sites. Both functions are pure.
"""

from __future__ import annotations

import json
import re
from typing import ClassVar

import httpx

from fioapi.domain.banking.exceptions import (
    FioApiError,
    NotFoundError,
    RateLimitedError,
    ServerError,
    TooManyItemsError,
    TransportError,
    UnauthorizedError,
    UnexpectedStatusError,
)

MAX_REASON_LENGTH = 200

_TAG_PATTERN = re.compile(r"<[^>]+>")
_XML_MESSAGE_PATTERN = re.compile(
    r"<(?:errorMessage|message)>\s*(.*?)\s*</",
    re.IGNORECASE | re.DOTALL,
)


class StatusTable:
    """Bank status codes and the error class each maps to."""

    STATUS_KINDS: ClassVar[dict[int, type[FioApiError]]] = {
        401: UnauthorizedError,
        403: UnauthorizedError,
        404: NotFoundError,  # Unknown range/account or malformed request
        409: RateLimitedError,  # Less than 30 s since the previous request
        413: TooManyItemsError,  # More than 50 000 items requested
        422: UnauthorizedError,  # Token not authorized for this operation
        429: RateLimitedError,
    }

    @classmethod
    def lookup(cls, status_code: int) -> type[FioApiError]:
        known = cls.STATUS_KINDS.get(status_code)
        if known is not None:
            return known
        if 500 <= status_code <= 599:
            return ServerError
        return UnexpectedStatusError


def map_status(status_code: int, body: str | bytes | None = None) -> FioApiError:
    """Return the typed error for a non-2xx response.

    Parameters
    ----------
    status_code
        HTTP status of the response
    body
        Optional response body (already scrubbed of the token), used only to
        extract a short human-readable reason
    """
    error_cls = StatusTable.lookup(status_code)
    return error_cls(status_code, reason=extract_reason(body))


def map_transport_error(exc: httpx.HTTPError) -> TransportError:
    """Return the typed error for a failure below HTTP."""
    if isinstance(exc, httpx.TimeoutException):
        return TransportError(
            "Request to the bank timed out",
            reason=type(exc).__name__,
        )
    if isinstance(exc, httpx.ConnectError):
        return TransportError(
            "Could not connect to the bank",
            reason=type(exc).__name__,
        )
    return TransportError(reason=type(exc).__name__)


def extract_reason(body: str | bytes | None) -> str | None:
    """Pull a short reason text out of an error body.

    Understands the bank's XML error documents, JSON objects with a
    ``message``/``error`` key, and falls back to the first non-empty line
    with markup stripped.
    """
    if body is None:
        return None
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    body = body.strip()
    if not body:
        return None

    reason = _reason_from_json(body) or _reason_from_xml(body) or _first_line(body)
    if not reason:
        return None
    return reason[:MAX_REASON_LENGTH]


def _reason_from_json(body: str) -> str | None:
    if not body.startswith("{"):
        return None
    try:
        document = json.loads(body)
    except ValueError:
        return None
    if not isinstance(document, dict):
        return None
    for key in ("message", "error", "errorMessage"):
        value = document.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _reason_from_xml(body: str) -> str | None:
    match = _XML_MESSAGE_PATTERN.search(body)
    if match:
        return _TAG_PATTERN.sub("", match.group(1)).strip() or None
    return None


def _first_line(body: str) -> str | None:
    for line in _TAG_PATTERN.sub("\n", body).splitlines():
        line = " ".join(line.split())
        if line:
            return line
    return None
