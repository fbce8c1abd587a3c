"""Payload parser - translates the bank's JSON report into domain objects.

Parsing is pure and all-or-nothing: the first missing or malformed required
value aborts with a MalformedFieldError and no partial model is returned.
The same bytes always yield an equal ParsedReport, so stored fixtures can be
parsed offline exactly like live responses.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError

from fioapi.domain.banking.exceptions import (
    MalformedFieldError,
    UnsupportedFormatError,
)
from fioapi.domain.banking.value_objects import (
    AccountInfo,
    AccountStatementFormat,
    LastStatementInfo,
    ParsedReport,
    Transaction,
    TransactionReportFormat,
    coerce_format,
)
from fioapi.domain.shared.time import parse_bank_date
from fioapi.infrastructure.fio.columns import (
    COLUMNS_BY_FIELD,
    HEADER_FIELDS,
    TRANSACTION_COLUMNS,
    ColumnKind,
    ColumnSpec,
)

logger = logging.getLogger(__name__)

ReportFormatArg = TransactionReportFormat | AccountStatementFormat | str


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------


def parse_report(
    data: bytes | str,
    fmt: ReportFormatArg = TransactionReportFormat.JSON,
) -> ParsedReport:
    """Parse a structured report into account info and transactions.

    Parameters
    ----------
    data
        Raw response body (bytes or already decoded text)
    fmt
        Format the body was requested in; anything but json is rejected

    Raises
    ------
    UnsupportedFormatError
        If fmt is not the structured json format
    MalformedFieldError
        If the envelope or a required value is missing or malformed
    """
    ensure_structured_format(fmt)
    document = _load_json(data)

    statement = _require_object(document, "accountStatement", "accountStatement")
    info = _require_object(statement, "info", "accountStatement.info")

    account = _parse_account_info(info)
    transactions = _parse_transaction_list(statement.get("transactionList"))

    logger.debug("Parsed report with %d transactions", len(transactions))
    return ParsedReport(account=account, transactions=tuple(transactions))


def parse_account_info(data: bytes | str) -> AccountInfo:
    """Parse only the header of a structured report."""
    return parse_report(data).account


def parse_transactions(data: bytes | str) -> ParsedReport:
    """Parse a structured json report; alias kept for the client façade."""
    return parse_report(data)


def parse_last_statement_info(data: bytes | str) -> LastStatementInfo:
    """Parse the ``<year>,<statement id>`` body of the last-statement call."""
    text = _decode(data).strip()
    parts = [part.strip() for part in text.split(",")]
    if len(parts) < 2:
        msg = f"expected '<year>,<id>', got {text[:40]!r}"
        raise MalformedFieldError("lastStatement", msg)

    try:
        return LastStatementInfo(year=int(parts[0]), statement_id=int(parts[1]))
    except (ValueError, ValidationError) as e:
        raise MalformedFieldError("lastStatement", str(e)) from e


def ensure_structured_format(fmt: ReportFormatArg) -> None:
    """Reject any format other than structured json."""
    fmt = coerce_format(fmt)
    if not fmt.is_structured:
        raise UnsupportedFormatError(fmt.value)


# -----------------------------------------------------------------------------
# Envelope
# -----------------------------------------------------------------------------


def _reject_constant(name: str) -> Any:
    msg = f"non-finite number {name} is not allowed"
    raise ValueError(msg)


def _decode(data: bytes | str) -> str:
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedFieldError("payload", f"not valid UTF-8: {e}") from e


def _load_json(data: bytes | str) -> Any:
    text = _decode(data)
    if not text.strip():
        raise MalformedFieldError("payload", "empty body")
    try:
        # parse_float keeps the exact decimal scale of every JSON number
        return json.loads(
            text,
            parse_float=Decimal,
            parse_constant=_reject_constant,
        )
    except ValueError as e:
        raise MalformedFieldError("payload", f"invalid json: {e}") from e


def _require_object(parent: Any, key: str, path: str) -> dict[str, Any]:
    if not isinstance(parent, dict):
        raise MalformedFieldError(path, "parent is not an object")
    value = parent.get(key)
    if not isinstance(value, dict):
        reason = "missing" if value is None else "expected an object"
        raise MalformedFieldError(path, reason)
    return value


# -----------------------------------------------------------------------------
# Header
# -----------------------------------------------------------------------------


def _parse_account_info(info: dict[str, Any]) -> AccountInfo:
    values: dict[str, Any] = {}
    for key, (field, kind) in HEADER_FIELDS.items():
        column = f"info.{key}"
        values[field] = _convert(info.get(key), kind, column)

    try:
        return AccountInfo(**values)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else "info"
        raise MalformedFieldError(_header_column(field), error["msg"]) from e


def _header_column(field: str) -> str:
    for key, (name, _) in HEADER_FIELDS.items():
        if name == field:
            return f"info.{key}"
    return "info"


# -----------------------------------------------------------------------------
# Transactions
# -----------------------------------------------------------------------------


def _parse_transaction_list(transaction_list: Any) -> list[Transaction]:
    if transaction_list is None:
        return []
    if not isinstance(transaction_list, dict):
        raise MalformedFieldError(
            "accountStatement.transactionList",
            "expected an object",
        )

    entries = transaction_list.get("transaction")
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise MalformedFieldError(
            "accountStatement.transactionList.transaction",
            "expected a list",
        )

    return [_parse_transaction(entry, index) for index, entry in enumerate(entries)]


def _parse_transaction(entry: Any, index: int) -> Transaction:
    if not isinstance(entry, dict):
        raise MalformedFieldError(
            f"transaction[{index}]",
            "expected an object",
        )

    values: dict[str, Any] = {}
    for spec in TRANSACTION_COLUMNS:
        value = _convert(_cell_value(entry, spec, index), spec.kind, spec.key, index)
        if value is None and spec.required:
            raise MalformedFieldError(
                spec.key,
                f"required column missing in transaction #{index}",
            )
        values[spec.field] = value

    try:
        return Transaction(**values)
    except ValidationError as e:
        error = e.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else ""
        spec = COLUMNS_BY_FIELD.get(field)
        column = spec.key if spec else f"transaction[{index}]"
        raise MalformedFieldError(
            column,
            f"{error['msg']} in transaction #{index}",
        ) from e


def _cell_value(entry: dict[str, Any], spec: ColumnSpec, index: int) -> Any:
    cell = entry.get(spec.key)
    if cell is None:
        return None
    if not isinstance(cell, dict):
        raise MalformedFieldError(
            spec.key,
            f"expected an object with 'value' in transaction #{index}",
        )
    return cell.get("value")


# -----------------------------------------------------------------------------
# Value conversion
# -----------------------------------------------------------------------------


def _convert(
    value: Any,
    kind: ColumnKind,
    column: str,
    index: int | None = None,
) -> Any:
    """Convert a raw JSON value according to its column kind.

    None and empty strings become None; the caller decides whether that is
    allowed.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None

    where = f" in transaction #{index}" if index is not None else ""
    try:
        if kind is ColumnKind.TEXT:
            return _to_text(value)
        if kind is ColumnKind.IDENTIFIER:
            return _to_identifier(value)
        if kind is ColumnKind.DATE:
            return _to_date(value)
        if kind is ColumnKind.DECIMAL:
            return _to_decimal(value)
        return _to_integer(value)
    except (TypeError, ValueError, InvalidOperation) as e:
        raise MalformedFieldError(column, f"{e}{where}") from e


def _to_text(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, str | int | Decimal):
        msg = f"expected text, got {type(value).__name__}"
        raise TypeError(msg)
    return str(value)


def _to_identifier(value: Any) -> str:
    if isinstance(value, Decimal):
        if value != value.to_integral_value():
            msg = f"identifier {value} is not an integer"
            raise ValueError(msg)
        return str(int(value))
    return _to_text(value)


def _to_date(value: Any) -> date:
    if not isinstance(value, str):
        msg = f"expected a date string, got {type(value).__name__}"
        raise TypeError(msg)
    return parse_bank_date(value)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        msg = "expected a number, got bool"
        raise TypeError(msg)
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, str):
        amount = Decimal(value)
    else:
        msg = f"expected a number, got {type(value).__name__}"
        raise TypeError(msg)

    if not amount.is_finite():
        msg = f"{value!r} is not a finite number"
        raise ValueError(msg)
    return amount


def _to_integer(value: Any) -> int:
    if isinstance(value, bool):
        msg = "expected an integer, got bool"
        raise TypeError(msg)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.lstrip("-").isdigit():
        return int(value)
    msg = f"expected an integer, got {value!r}"
    raise ValueError(msg)
