"""Typed async client for the Fio banka transaction-export REST API.

Fetches transaction reports and account statements, parses the bank's
column-numbered JSON into immutable domain objects, and reports failures
through a closed error taxonomy.
"""

from fioapi.domain.banking.exceptions import (
    FioApiError,
    InvalidRequestError,
    MalformedFieldError,
    NotFoundError,
    ParseError,
    RateLimitedError,
    ServerError,
    TooManyItemsError,
    TransportError,
    UnauthorizedError,
    UnexpectedStatusError,
    UnsupportedFormatError,
)
from fioapi.domain.banking.ports import DownloadMarkerPort
from fioapi.domain.banking.value_objects import (
    AccountInfo,
    AccountStatementFormat,
    DownloadAddressing,
    LastStatementInfo,
    ParsedReport,
    PeriodAddressing,
    RawPayload,
    SinceLastDownloadAddressing,
    StatementAddressing,
    Transaction,
    TransactionReportFormat,
)
from fioapi.domain.shared.exceptions import FioError, FioErrorKind
from fioapi.infrastructure.fio import FioClient, parse_report
from fioapi.infrastructure.persistence import (
    FileDownloadMarkerStore,
    InMemoryDownloadMarkerStore,
)

__all__ = [
    # Client
    "FioClient",
    "parse_report",
    # Domain model
    "AccountInfo",
    "AccountStatementFormat",
    "DownloadAddressing",
    "LastStatementInfo",
    "ParsedReport",
    "PeriodAddressing",
    "RawPayload",
    "SinceLastDownloadAddressing",
    "StatementAddressing",
    "Transaction",
    "TransactionReportFormat",
    # Marker
    "DownloadMarkerPort",
    "FileDownloadMarkerStore",
    "InMemoryDownloadMarkerStore",
    # Errors
    "FioError",
    "FioErrorKind",
    "FioApiError",
    "InvalidRequestError",
    "MalformedFieldError",
    "NotFoundError",
    "ParseError",
    "RateLimitedError",
    "ServerError",
    "TooManyItemsError",
    "TransportError",
    "UnauthorizedError",
    "UnexpectedStatusError",
    "UnsupportedFormatError",
]
