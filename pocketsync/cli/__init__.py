"""CLI package for pocketsync."""

from __future__ import annotations

import sys

# Ensure stdout handles Unicode when piped (titles are arbitrary web content)
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

import click
from rich.markup import escape

from pocketsync import __version__
from pocketsync.cli.links import register_link_commands
from pocketsync.cli.utils import confirm_in_terminal, console, setup_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="pocketsync")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Archive your Pocket reading list into a local SQLite database.

    Run 'pocketsync' without arguments to authorize (first run, or when
    the stored session is no longer valid) or to sync your links.

    \b
    Setup:
      Create config.json with consumer_key, redirect_url and api_endpoint.
      Set POCKETSYNC_CONFIG to use a different file.
    """
    from pocketsync.config import ConfigError, get_settings

    try:
        settings = get_settings()
    except ConfigError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise SystemExit(1) from None

    setup_logging(settings.log_level, settings.log_file)

    if ctx.invoked_subcommand is None:
        ctx.exit(_run_default(settings))


def _run_default(settings) -> int:
    """Authorize or sync, and print what happened."""
    from pocketsync.core.driver import BRANCH_AUTHORIZE, run

    result = run(settings, confirm_in_terminal)
    error = escape(result.error or "")

    if result.exit_code != 0:
        console.print(f"[red]Error:[/red] {error}", soft_wrap=True)
    elif result.branch == BRANCH_AUTHORIZE:
        if result.saved:
            console.print(
                "[green]Authorized.[/green] Run 'pocketsync' again to sync your links."
            )
        else:
            console.print(f"[red]Authorization failed:[/red] {error}", soft_wrap=True)
    elif result.report is not None:
        report = result.report
        style = "green" if report.ok else "yellow"
        console.print(f"[{style}]{report.summary()}[/{style}]")
        for item_id, message in report.failed:
            console.print(f"  [dim]{item_id}:[/dim] {escape(message)}")
    else:
        console.print(f"[red]Sync failed:[/red] {error}", soft_wrap=True)

    return result.exit_code


# Register all command groups
register_link_commands(cli)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = ["cli", "main"]
