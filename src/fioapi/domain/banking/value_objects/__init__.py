"""Value objects for banking domain."""

from fioapi.domain.banking.value_objects.account_info import AccountInfo
from fioapi.domain.banking.value_objects.download_addressing import (
    DownloadAddressing,
    PeriodAddressing,
    SinceLastDownloadAddressing,
    StatementAddressing,
)
from fioapi.domain.banking.value_objects.last_statement_info import LastStatementInfo
from fioapi.domain.banking.value_objects.parsed_report import ParsedReport
from fioapi.domain.banking.value_objects.raw_payload import RawPayload
from fioapi.domain.banking.value_objects.report_format import (
    AccountStatementFormat,
    ReportFormat,
    TransactionReportFormat,
    coerce_format,
)
from fioapi.domain.banking.value_objects.transaction import Transaction

__all__ = [
    "AccountInfo",
    "AccountStatementFormat",
    "DownloadAddressing",
    "LastStatementInfo",
    "ParsedReport",
    "PeriodAddressing",
    "RawPayload",
    "ReportFormat",
    "SinceLastDownloadAddressing",
    "StatementAddressing",
    "Transaction",
    "TransactionReportFormat",
    "coerce_format",
]
