"""API token value object."""

from __future__ import annotations

from dataclasses import dataclass

TOKEN_LENGTH = 64
MASK = "<token>"


@dataclass(frozen=True)
class ApiToken:
    """
    Value object wrapping the bank API token.

    The token is part of every request path, so it must never reach logs,
    reprs or error messages. The real value is only accessible via
    get_value(); redact() scrubs it from arbitrary text.
    """

    _value: str

    def __post_init__(self):
        if not isinstance(self._value, str):
            msg = "API token must be a string"
            raise TypeError(msg)

        if len(self._value) != TOKEN_LENGTH:
            msg = (
                f"API token must be {TOKEN_LENGTH} characters, "
                f"got {len(self._value)}"
            )
            raise ValueError(msg)

    def get_value(self) -> str:
        """Return the actual token. Only request building should call this."""
        return self._value

    def redact(self, text: str) -> str:
        """Replace every occurrence of the token in text with a mask."""
        return text.replace(self._value, MASK)

    def __str__(self) -> str:
        return MASK

    def __repr__(self) -> str:
        return f"ApiToken({MASK})"

    def __len__(self) -> int:
        return len(self._value)
