from functools import lru_cache
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._utils import default_marker_path, resolve_env_file_path

DEFAULT_BASE_URL = "https://fioapi.fio.cz/v1/rest"


class Settings(BaseSettings):
    """Client configuration, read from FIO_* environment variables."""

    log_level: str = "INFO"

    # Required for every network call, but not for offline parsing
    api_token: SecretStr | None = None

    base_url: str = Field(default=DEFAULT_BASE_URL, min_length=8)
    timeout_seconds: float = Field(default=10.0, gt=0)

    # Plain tracking file for the "since last download" marker
    marker_file: Path = Field(default_factory=default_marker_path)

    model_config = SettingsConfigDict(
        env_file=resolve_env_file_path(),
        env_file_encoding="utf-8",
        env_prefix="FIO_",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def clear_settings_cache() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
