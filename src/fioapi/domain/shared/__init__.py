"""Shared domain components.

This module exports the error taxonomy base, time helpers and value
objects used across the package.
"""

from fioapi.domain.shared.exceptions import FioError, FioErrorKind
from fioapi.domain.shared.time import (
    BANK_TIMEZONE,
    parse_bank_date,
    today_at_bank,
    utc_now,
)

__all__ = [
    # Error taxonomy
    "FioErrorKind",
    "FioError",
    # Utilities
    "BANK_TIMEZONE",
    "parse_bank_date",
    "today_at_bank",
    "utc_now",
]
