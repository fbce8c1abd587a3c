"""Parsed report value object."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from fioapi.domain.banking.value_objects.account_info import AccountInfo
from fioapi.domain.banking.value_objects.transaction import Transaction


class ParsedReport(BaseModel):
    """The typed content of one structured report response.

    Transactions keep the order in which the bank returned them.
    """

    account: AccountInfo
    transactions: tuple[Transaction, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @property
    def covered_until(self) -> date | None:
        """Last date this report is known to cover.

        Prefers the header's end date; falls back to the latest booking date.
        """
        if self.account.date_end is not None:
            return self.account.date_end
        if self.transactions:
            return max(tx.booking_date for tx in self.transactions)
        return None
