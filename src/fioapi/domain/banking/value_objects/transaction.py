"""Transaction value object."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class Transaction(BaseModel):
    """Value object representing one movement on the account.

    The amount sign is exactly what the bank supplied: debits are negative,
    credits positive.
    """

    transaction_id: str = Field(..., min_length=1, description="Unique per account")
    booking_date: date = Field(..., description="When transaction was booked")
    amount: Decimal = Field(..., description="Signed amount, exact decimal")
    currency: str = Field(..., min_length=1, max_length=3)

    # Counterparty (absent for fees and interest)
    account_id: str | None = Field(default=None, description="Counter-account")
    account_name: str | None = Field(default=None)
    bank_id: str | None = Field(default=None, description="Counter-bank code")
    bank_name: str | None = Field(default=None)
    bic: str | None = Field(default=None)

    # Payment symbols
    constant_symbol: str | None = Field(default=None)
    variable_symbol: str | None = Field(default=None)
    specific_symbol: str | None = Field(default=None)

    user_identification: str | None = Field(default=None)
    remittance_info: str | None = Field(
        default=None,
        description="Message for the recipient",
    )
    transaction_type: str | None = Field(default=None)
    executor: str | None = Field(default=None)
    specification: str | None = Field(default=None)
    comment: str | None = Field(default=None)
    order_id: int | None = Field(default=None, description="Instruction ID")
    payer_reference: str | None = Field(default=None)

    model_config = ConfigDict(
        frozen=True,  # Immutable
        str_strip_whitespace=True,
    )

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str:
        return str(value)

    @field_serializer("booking_date")
    def serialize_date(self, value: date) -> str:
        return value.isoformat()

    def is_credit(self) -> bool:
        return self.amount > 0

    def is_debit(self) -> bool:
        return self.amount < 0

    def __str__(self) -> str:
        direction = "+" if self.is_credit() else ""
        counterparty = self.account_name or self.account_id or ""
        return (
            f"{self.booking_date}: {direction}{self.amount} {self.currency} "
            f"[{self.transaction_id}] {counterparty}"
        ).rstrip()
