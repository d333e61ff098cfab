"""Configuration dataclass models for pocketsync."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONFIG_PATH = Path("./config.json")
DEFAULT_DB_PATH = Path("./links.db")
DEFAULT_AUTHORIZE_BASE = "https://getpocket.com/auth/authorize"
DEFAULT_LOG_LEVEL = "INFO"

# Keys every credential document must carry
REQUIRED_CREDENTIAL_KEYS = ("consumer_key", "redirect_url", "api_endpoint")


@dataclass(frozen=True)
class Credentials:
    """Consumer identity, request code and access token for one Pocket account.

    Instances are never mutated. Each authorization step returns an updated
    copy via ``dataclasses.replace``.
    """

    consumer_key: str
    redirect_url: str
    api_endpoint: str
    code: str | None = None  # Short-lived request code
    token: str | None = None  # Long-lived access token
    auth_url: str | None = None  # Built from code, None until presented
    code_valid: bool | None = None  # Outcome of the last session check


@dataclass
class Settings:
    """Runtime settings, read from the environment (and .env files)."""

    config_path: Path = DEFAULT_CONFIG_PATH
    db_path: Path = DEFAULT_DB_PATH
    authorize_base: str = DEFAULT_AUTHORIZE_BASE
    timeout: float | None = None  # None blocks without limit
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Path | None = None
