"""Account info value object."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class AccountInfo(BaseModel):
    """
    Value object representing the header of a report or statement.

    Every field is optional: the bank omits values it has nothing to say
    about (e.g. balances of an empty range).
    """

    # Core identification
    account_id: str | None = Field(default=None, description="Account number")
    bank_id: str | None = Field(default=None, description="Bank code")
    currency: str | None = Field(default=None, max_length=3)
    iban: str | None = Field(default=None, max_length=34)
    bic: str | None = Field(default=None, max_length=11)

    # Balances for the covered range
    opening_balance: Decimal | None = Field(default=None)
    closing_balance: Decimal | None = Field(default=None)

    # Covered range
    date_start: date | None = Field(default=None)
    date_end: date | None = Field(default=None)

    # Statement bookkeeping
    year_list: int | None = Field(default=None, description="Statement year")
    id_list: int | None = Field(default=None, description="Statement number")
    id_from: int | None = Field(default=None, description="First transaction ID")
    id_to: int | None = Field(default=None, description="Last transaction ID")
    id_last_download: int | None = Field(
        default=None,
        description="Bank-side bookmark at the time of the download",
    )

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
    )

    @field_serializer("opening_balance", "closing_balance")
    def serialize_balance(self, value: Decimal | None) -> str | None:
        return str(value) if value is not None else None

    def __str__(self) -> str:
        account = f"{self.account_id}/{self.bank_id}" if self.account_id else "?"
        return f"{account} ({self.currency or '-'}) {self.date_start}..{self.date_end}"
