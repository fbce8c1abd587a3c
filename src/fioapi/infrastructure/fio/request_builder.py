"""Request path building for the bank's REST endpoints.

The token is a path segment of every endpoint. Paths built here must only
be logged through ApiToken.redact().
"""

from __future__ import annotations

from datetime import date, timedelta

from fioapi.domain.banking.exceptions import (
    InvalidRequestError,
    UnsupportedFormatError,
)
from fioapi.domain.banking.value_objects import (
    DownloadAddressing,
    PeriodAddressing,
    ReportFormat,
    SinceLastDownloadAddressing,
    StatementAddressing,
    TransactionReportFormat,
    coerce_format,
)
from fioapi.domain.shared.value_objects import ApiToken

# Data older than this needs an extra strong authorization in the bank's
# internet banking, so unattended requests cannot go further back.
MAX_LOOKBACK_DAYS = 90

DATE_FORMAT = "%Y-%m-%d"


def resolve_since_last_download(
    marker: date | None,
    today: date,
) -> PeriodAddressing:
    """Turn the download marker into an explicit date range ending today.

    Without a marker (first run) the range starts MAX_LOOKBACK_DAYS ago.
    A marker in the future is clamped to today.
    """
    if marker is None:
        return PeriodAddressing(
            date_from=today - timedelta(days=MAX_LOOKBACK_DAYS),
            date_to=today,
        )
    return PeriodAddressing(date_from=min(marker, today), date_to=today)


def build_report_path(
    addressing: DownloadAddressing,
    fmt: ReportFormat | str,
    token: ApiToken,
) -> str:
    """Build the path of a report request.

    SinceLastDownloadAddressing has to be resolved into a period first, see
    resolve_since_last_download(). Periods only accept transaction report
    formats.
    """
    fmt = coerce_format(fmt)
    if isinstance(addressing, PeriodAddressing):
        fmt = as_transaction_format(fmt)
        return (
            f"/periods/{token.get_value()}/"
            f"{addressing.date_from.strftime(DATE_FORMAT)}/"
            f"{addressing.date_to.strftime(DATE_FORMAT)}/"
            f"transactions.{fmt.value}"
        )

    if isinstance(addressing, StatementAddressing):
        return (
            f"/by-id/{token.get_value()}/"
            f"{addressing.year}/{addressing.statement_id}/"
            f"transactions.{fmt.value}"
        )

    if isinstance(addressing, SinceLastDownloadAddressing):
        msg = "since-last-download addressing must be resolved to a period first"
        raise InvalidRequestError(msg)

    msg = f"unknown addressing mode {addressing!r}"
    raise InvalidRequestError(msg)


def build_server_bookmark_path(
    fmt: TransactionReportFormat | str,
    token: ApiToken,
) -> str:
    """Path of the bank-side "since last download" report."""
    fmt = as_transaction_format(coerce_format(fmt))
    return f"/last/{token.get_value()}/transactions.{fmt.value}"


def build_last_statement_path(token: ApiToken) -> str:
    return f"/lastStatement/{token.get_value()}/statement"


def build_set_last_id_path(token: ApiToken, transaction_id: int) -> str:
    if transaction_id < 0:
        msg = "transaction_id must be a positive integer"
        raise InvalidRequestError(msg)
    return f"/set-last-id/{token.get_value()}/{transaction_id}/"


def build_set_last_date_path(token: ApiToken, download_date: date) -> str:
    return f"/set-last-date/{token.get_value()}/{download_date.strftime(DATE_FORMAT)}/"


def as_transaction_format(fmt: ReportFormat) -> TransactionReportFormat:
    """Narrow a format to the transaction report formats."""
    if isinstance(fmt, TransactionReportFormat):
        return fmt
    try:
        return TransactionReportFormat(fmt.value)
    except ValueError as e:
        msg = f"Format '{fmt.value}' is only available for account statements"
        raise UnsupportedFormatError(fmt.value, message=msg) from e
