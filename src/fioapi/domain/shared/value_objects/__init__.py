"""Shared value objects."""

from fioapi.domain.shared.value_objects.api_token import ApiToken

__all__ = [
    "ApiToken",
]
