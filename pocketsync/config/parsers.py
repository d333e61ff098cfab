"""Configuration parsing functions for pocketsync."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .models import (
    DEFAULT_AUTHORIZE_BASE,
    DEFAULT_CONFIG_PATH,
    DEFAULT_DB_PATH,
    DEFAULT_LOG_LEVEL,
    REQUIRED_CREDENTIAL_KEYS,
    Credentials,
    Settings,
)

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when the credential document cannot be used."""

    pass


class ConfigMissing(ConfigError):
    """Raised when the credential document does not exist."""

    pass


def expand_path(path: str | Path) -> Path:
    """Expand ~ and environment variables in a path."""
    path_str = str(path)
    # Expand environment variables
    path_str = os.path.expandvars(path_str)
    # Expand ~
    return Path(path_str).expanduser()


def _parse_timeout(value: str | None) -> float | None:
    """Parse POCKETSYNC_TIMEOUT. Empty, zero or negative means no timeout."""
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        raise ConfigError(f"Invalid timeout: {value!r}") from None
    return seconds if seconds > 0 else None


def _parse_log_level(value: str | None) -> str:
    if not value:
        return DEFAULT_LOG_LEVEL
    level = value.strip().upper()
    if level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level: {value!r}. Use one of {', '.join(VALID_LOG_LEVELS)}"
        )
    return level


def parse_settings(env_file: Path | None = None) -> Settings:
    """Build Settings from environment variables.

    Variables are loaded in this priority order (first wins):
    1. Shell environment variables
    2. The given env_file, or ./.env when none is given
    """
    if env_file is None:
        env_file = Path(".env")
    if env_file.exists():
        # override=False keeps variables already set in the shell
        load_dotenv(env_file, override=False)

    config_path = os.environ.get("POCKETSYNC_CONFIG")
    db_path = os.environ.get("POCKETSYNC_DB")
    log_file = os.environ.get("POCKETSYNC_LOG_FILE")

    return Settings(
        config_path=expand_path(config_path) if config_path else DEFAULT_CONFIG_PATH,
        db_path=expand_path(db_path) if db_path else DEFAULT_DB_PATH,
        authorize_base=os.environ.get("POCKETSYNC_AUTHORIZE_URL")
        or DEFAULT_AUTHORIZE_BASE,
        timeout=_parse_timeout(os.environ.get("POCKETSYNC_TIMEOUT")),
        log_level=_parse_log_level(os.environ.get("POCKETSYNC_LOG_LEVEL")),
        log_file=expand_path(log_file) if log_file else None,
    )


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string or null")
    return value


def parse_credentials(data: Any) -> Credentials:
    """Parse a decoded credential document.

    Unknown keys are ignored so hand-edited files keep working.

    Raises:
        ConfigError: If the document is not an object or lacks a required key
    """
    if not isinstance(data, dict):
        raise ConfigError("Credential document must be a JSON object")

    missing = [k for k in REQUIRED_CREDENTIAL_KEYS if not data.get(k)]
    if missing:
        raise ConfigError(f"Missing required keys: {', '.join(missing)}")

    for key in REQUIRED_CREDENTIAL_KEYS:
        if not isinstance(data[key], str):
            raise ConfigError(f"'{key}' must be a string")

    code_valid = data.get("code_valid")
    if code_valid is not None and not isinstance(code_valid, bool):
        raise ConfigError("'code_valid' must be true, false or null")

    return Credentials(
        consumer_key=data["consumer_key"],
        redirect_url=data["redirect_url"],
        api_endpoint=data["api_endpoint"],
        code=_optional_str(data, "code"),
        token=_optional_str(data, "token"),
        auth_url=_optional_str(data, "auth_url"),
        code_valid=code_valid,
    )
