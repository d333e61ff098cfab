"""Shared utilities for CLI commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from pocketsync.core.auth import AuthorizationAborted

# Main console for stdout (user-facing output)
console = Console(highlight=False)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO", log_file: Path | None = None) -> None:
    """Configure root logging for the process (no-op if already configured).

    Records go to stderr, and to log_file as well when one is given.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8", delay=True))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def confirm_in_terminal(auth_url: str) -> None:
    """Show the authorize URL and block until the user presses Enter.

    There is no timeout: the user may take as long as they need in the
    browser. A closed stdin aborts the handshake.
    """
    console.print("\n[bold]Authorize pocketsync with Pocket[/bold]")
    console.print("Open this URL in your browser and click [cyan]Authorize[/cyan]:\n")
    console.print(f"  {escape(auth_url)}\n", style="cyan", soft_wrap=True)
    try:
        console.input("[dim]Press Enter once you have authorized the app...[/dim] ")
    except EOFError:
        raise AuthorizationAborted("stdin closed before confirmation") from None
