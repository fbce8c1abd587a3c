"""Column table of the bank's structured transaction report.

Each transaction in the JSON report is an object keyed ``column<N>`` where N
is the bank's stable numeric column ID, e.g.::

    {"column1": {"value": -250.0, "name": "Objem", "id": 1}, ...}

The IDs, not names or positions, are the contract. This module maps every
column ID the client understands to a named, typed Transaction field; any
column not listed here is ignored by the parser.
"""

from dataclasses import dataclass
from enum import Enum


class ColumnKind(str, Enum):
    """How a raw cell value is converted."""

    IDENTIFIER = "identifier"
    TEXT = "text"
    DATE = "date"
    DECIMAL = "decimal"
    INTEGER = "integer"


@dataclass(frozen=True)
class ColumnSpec:
    """One entry of the column table."""

    column_id: int
    field: str
    kind: ColumnKind
    required: bool = False

    @property
    def key(self) -> str:
        return f"column{self.column_id}"


TRANSACTION_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec(22, "transaction_id", ColumnKind.IDENTIFIER, required=True),
    ColumnSpec(0, "booking_date", ColumnKind.DATE, required=True),
    ColumnSpec(1, "amount", ColumnKind.DECIMAL, required=True),
    ColumnSpec(14, "currency", ColumnKind.TEXT, required=True),
    ColumnSpec(2, "account_id", ColumnKind.TEXT),
    ColumnSpec(10, "account_name", ColumnKind.TEXT),
    ColumnSpec(3, "bank_id", ColumnKind.TEXT),
    ColumnSpec(12, "bank_name", ColumnKind.TEXT),
    ColumnSpec(4, "constant_symbol", ColumnKind.TEXT),
    ColumnSpec(5, "variable_symbol", ColumnKind.TEXT),
    ColumnSpec(6, "specific_symbol", ColumnKind.TEXT),
    ColumnSpec(7, "user_identification", ColumnKind.TEXT),
    ColumnSpec(16, "remittance_info", ColumnKind.TEXT),
    ColumnSpec(8, "transaction_type", ColumnKind.TEXT),
    ColumnSpec(9, "executor", ColumnKind.TEXT),
    ColumnSpec(18, "specification", ColumnKind.TEXT),
    ColumnSpec(25, "comment", ColumnKind.TEXT),
    ColumnSpec(26, "bic", ColumnKind.TEXT),
    ColumnSpec(17, "order_id", ColumnKind.INTEGER),
    ColumnSpec(27, "payer_reference", ColumnKind.TEXT),
)

COLUMNS_BY_FIELD: dict[str, ColumnSpec] = {
    spec.field: spec for spec in TRANSACTION_COLUMNS
}

# Header ("info") keys are named, not numbered.
HEADER_FIELDS: dict[str, tuple[str, ColumnKind]] = {
    "accountId": ("account_id", ColumnKind.TEXT),
    "bankId": ("bank_id", ColumnKind.TEXT),
    "currency": ("currency", ColumnKind.TEXT),
    "iban": ("iban", ColumnKind.TEXT),
    "bic": ("bic", ColumnKind.TEXT),
    "openingBalance": ("opening_balance", ColumnKind.DECIMAL),
    "closingBalance": ("closing_balance", ColumnKind.DECIMAL),
    "dateStart": ("date_start", ColumnKind.DATE),
    "dateEnd": ("date_end", ColumnKind.DATE),
    "yearList": ("year_list", ColumnKind.INTEGER),
    "idList": ("id_list", ColumnKind.INTEGER),
    "idFrom": ("id_from", ColumnKind.INTEGER),
    "idTo": ("id_to", ColumnKind.INTEGER),
    "idLastDownload": ("id_last_download", ColumnKind.INTEGER),
}
