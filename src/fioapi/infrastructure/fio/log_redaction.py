"""Token redaction for the HTTP library's own log records.

httpx logs every request URL at INFO level, and the API token is a path
segment of each of them. The filter below is attached to those loggers and
masks every token a FioClient was created with.
"""

from __future__ import annotations

import logging

from fioapi.domain.shared.value_objects import ApiToken

# Loggers that emit full request URLs.
REDACTED_LOGGERS = ("httpx",)


class TokenRedactingFilter(logging.Filter):
    """Rewrites log records so no registered token survives formatting."""

    def __init__(self):
        super().__init__()
        self._tokens: set[ApiToken] = set()

    def register(self, token: ApiToken) -> None:
        self._tokens.add(token)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._tokens:
            return True

        message = record.getMessage()
        redacted = message
        for token in self._tokens:
            redacted = token.redact(redacted)

        if redacted != message:
            record.msg = redacted
            record.args = ()
        return True


_token_filter = TokenRedactingFilter()


def install_token_redaction(token: ApiToken) -> None:
    """Mask token in the records of every logger in REDACTED_LOGGERS."""
    _token_filter.register(token)
    for name in REDACTED_LOGGERS:
        target = logging.getLogger(name)
        if _token_filter not in target.filters:
            target.addFilter(_token_filter)
