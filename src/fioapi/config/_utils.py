import os
from pathlib import Path


def _get_user_config_dir() -> Path:
    """Per-user configuration directory (XDG on Linux, ~/.config fallback)."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "fioapi"
    return Path.home() / ".config" / "fioapi"


def default_marker_path() -> Path:
    """Default location of the download marker tracking file."""
    return _get_user_config_dir() / "last_download"


def resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. FIO_ENV_FILE env var (full path)
    2. .env in the working directory
    3. .env in the user config directory
    """
    env_file_path = os.environ.get("FIO_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path).expanduser()
        if path.exists():
            return path

    local_env = Path.cwd() / ".env"
    if local_env.exists():
        return local_env

    user_env = _get_user_config_dir() / ".env"
    if user_env.exists():
        return user_env

    return None
