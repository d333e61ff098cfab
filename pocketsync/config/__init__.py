"""Configuration management for pocketsync.

This package provides the credential document and runtime settings.
The main entry points are:
- get_settings(): Get the global settings instance
- reset_settings(): Clear the cached settings
- load_credentials(): Load the credential document from its JSON file
- save_credentials(): Overwrite the credential document
"""

from __future__ import annotations

from .io import dump_credentials, load_credentials, save_credentials
from .models import (
    DEFAULT_AUTHORIZE_BASE,
    DEFAULT_CONFIG_PATH,
    DEFAULT_DB_PATH,
    Credentials,
    Settings,
)
from .parsers import (
    ConfigError,
    ConfigMissing,
    expand_path,
    parse_credentials,
    parse_settings,
)

# Singleton settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance.

    Reads the environment on first call, returns cached instance thereafter.
    """
    global _settings
    if _settings is None:
        _settings = parse_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings
    _settings = None


__all__ = [
    "DEFAULT_AUTHORIZE_BASE",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_DB_PATH",
    "ConfigError",
    "ConfigMissing",
    "Credentials",
    "Settings",
    "dump_credentials",
    "expand_path",
    "get_settings",
    "load_credentials",
    "parse_credentials",
    "parse_settings",
    "reset_settings",
    "save_credentials",
]
