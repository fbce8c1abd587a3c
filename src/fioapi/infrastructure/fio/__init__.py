"""Adapter for the Fio banka REST API: client, parser and error mapping."""

from fioapi.infrastructure.fio.client import BASE_URL, FioClient
from fioapi.infrastructure.fio.error_mapper import map_status, map_transport_error
from fioapi.infrastructure.fio.payload_parser import (
    parse_account_info,
    parse_last_statement_info,
    parse_report,
    parse_transactions,
)

__all__ = [
    "BASE_URL",
    "FioClient",
    "map_status",
    "map_transport_error",
    "parse_account_info",
    "parse_last_statement_info",
    "parse_report",
    "parse_transactions",
]
