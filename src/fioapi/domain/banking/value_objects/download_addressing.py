"""Download addressing value objects.

A report request is addressed in exactly one of three ways: an explicit
date range, a statement number within a year, or "since the last
successful download" as recorded by the download marker.
"""

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PeriodAddressing(BaseModel):
    """Transactions booked between two dates (both inclusive)."""

    mode: Literal["period"] = "period"
    date_from: date
    date_to: date

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_range(self) -> "PeriodAddressing":
        if self.date_from > self.date_to:
            msg = (
                f"start {self.date_from} must be before or equal "
                f"to end {self.date_to}"
            )
            raise ValueError(msg)
        return self

    def __str__(self) -> str:
        return f"{self.date_from}..{self.date_to}"


class StatementAddressing(BaseModel):
    """An official account statement identified by year and number."""

    mode: Literal["statement"] = "statement"
    year: int = Field(..., ge=1900, le=9999)
    statement_id: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"statement {self.year}/{self.statement_id}"


class SinceLastDownloadAddressing(BaseModel):
    """Everything since the date recorded by the download marker."""

    mode: Literal["since_last_download"] = "since_last_download"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "since last download"


DownloadAddressing = PeriodAddressing | StatementAddressing | SinceLastDownloadAddressing
