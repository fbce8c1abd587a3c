"""Report format value objects.

The bank exposes the same data in several export formats. Only the
structured JSON format is modelled; every other format is an opaque payload
the caller may persist but not introspect.
"""

from enum import Enum

from fioapi.domain.banking.exceptions import UnsupportedFormatError


class TransactionReportFormat(str, Enum):
    """Formats available for transaction reports (period / bookmark)."""

    CSV = "csv"
    GPC = "gpc"
    HTML = "html"
    JSON = "json"
    OFX = "ofx"
    XML = "xml"

    @property
    def is_structured(self) -> bool:
        return self is TransactionReportFormat.JSON

    @property
    def is_binary(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.value


class AccountStatementFormat(str, Enum):
    """Formats available for official account statements."""

    CSV = "csv"
    GPC = "gpc"
    HTML = "html"
    JSON = "json"
    OFX = "ofx"
    XML = "xml"
    PDF = "pdf"
    MT940 = "mt940"
    CBA_XML = "cba_xml"
    SBA_XML = "sba_xml"

    @property
    def is_structured(self) -> bool:
        return self is AccountStatementFormat.JSON

    @property
    def is_binary(self) -> bool:
        return self is AccountStatementFormat.PDF

    def __str__(self) -> str:
        return self.value


ReportFormat = TransactionReportFormat | AccountStatementFormat


def coerce_format(fmt: ReportFormat | str) -> ReportFormat:
    """Turn a caller-supplied format tag into a format enum member.

    Plain strings are matched case-insensitively. Tags shared by both
    enums resolve to TransactionReportFormat, statement-only tags to
    AccountStatementFormat.

    Raises
    ------
    UnsupportedFormatError
        If the tag names no format the bank exports
    """
    if isinstance(fmt, TransactionReportFormat | AccountStatementFormat):
        return fmt

    tag = fmt.strip().lower() if isinstance(fmt, str) else fmt
    for enum_cls in (TransactionReportFormat, AccountStatementFormat):
        try:
            return enum_cls(tag)
        except ValueError:
            continue

    raise UnsupportedFormatError(
        str(fmt),
        message=f"Format '{fmt}' is not an export format of the bank",
    )
