"""Credential document I/O for pocketsync."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import asdict
from pathlib import Path

from .models import Credentials
from .parsers import ConfigError, ConfigMissing, parse_credentials


def load_credentials(config_path: Path) -> Credentials:
    """Load the credential document from a JSON file.

    Raises:
        ConfigMissing: If the file does not exist
        ConfigError: If the file cannot be read, is not valid JSON, or lacks
            required keys
    """
    if not config_path.exists():
        raise ConfigMissing(f"Config file not found: {config_path}")

    try:
        with config_path.open(encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file {config_path} is not valid JSON: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e

    return parse_credentials(data)


def dump_credentials(credentials: Credentials) -> str:
    """Serialize credentials to the flat, pretty-printed JSON document."""
    # All keys are written, None as null, in field order
    return json.dumps(asdict(credentials), indent=2) + "\n"


def save_credentials(credentials: Credentials, config_path: Path) -> None:
    """Overwrite the credential document.

    The document is written to a temporary file in the same directory and
    moved into place, so a failed write never leaves a truncated file.
    """
    content = dump_credentials(credentials)
    directory = config_path.parent

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{config_path.name}.", suffix=".tmp", dir=directory
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, config_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
