"""Raw payload value object."""

from pydantic import BaseModel, ConfigDict

from fioapi.domain.banking.value_objects.report_format import ReportFormat


class RawPayload(BaseModel):
    """Body of a successful report response, in the requested format."""

    content: bytes
    fmt: ReportFormat

    model_config = ConfigDict(frozen=True)

    @property
    def is_structured(self) -> bool:
        return self.fmt.is_structured

    @property
    def is_binary(self) -> bool:
        return self.fmt.is_binary

    @property
    def text(self) -> str:
        """Decoded body. Raises ValueError for binary formats."""
        if self.is_binary:
            msg = f"{self.fmt} payload is binary"
            raise ValueError(msg)
        return self.content.decode("utf-8")

    @property
    def size(self) -> int:
        return len(self.content)

    def __repr__(self) -> str:
        return f"RawPayload(fmt={self.fmt.value!r}, size={self.size})"
