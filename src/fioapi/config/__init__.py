"""Configuration for the Fio client."""

from fioapi.config.settings import Settings, clear_settings_cache, get_settings

__all__ = [
    "Settings",
    "clear_settings_cache",
    "get_settings",
]
