"""Last account statement info value object."""

from pydantic import BaseModel, ConfigDict, Field


class LastStatementInfo(BaseModel):
    """Year and number of the last official statement issued by the bank."""

    year: int = Field(..., ge=1900)
    statement_id: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.year}/{self.statement_id}"
