"""Read-only commands for stored links and credentials."""

from __future__ import annotations

import click
from rich.markup import escape
from rich.table import Table

from pocketsync.cli.utils import console


def register_link_commands(cli: click.Group) -> None:
    """Register link and status commands with the CLI."""
    cli.add_command(links_cmd)
    cli.add_command(status_cmd)


@click.command("links")
@click.option("--limit", "-l", default=20, help="Maximum links to show (0 for all)")
def links_cmd(limit: int) -> None:
    """List links stored by previous syncs.

    \b
    Examples:
      pocketsync links            # Show the 20 most recently added links
      pocketsync links -l 0       # Show every stored link
    """
    from pocketsync.config import get_settings
    from pocketsync.index.db import Database, PersistenceError, init_db
    from pocketsync.index.links_repo import count_links, list_links

    settings = get_settings()

    if not settings.db_path.exists():
        console.print("[dim]No links stored yet. Run 'pocketsync' to sync.[/dim]")
        return

    with Database(settings.db_path) as db:
        try:
            init_db(db)
        except PersistenceError as e:
            console.print(f"[red]Database error:[/red] {escape(str(e))}")
            raise SystemExit(1) from None
        total = count_links(db)
        stored = list_links(db, limit=limit or None)

    if not stored:
        console.print("[dim]No links stored yet. Run 'pocketsync' to sync.[/dim]")
        return

    table = Table(show_header=True, title=f"Links ({len(stored)} of {total})")
    table.add_column("Item", style="dim")
    table.add_column("Title")
    table.add_column("URL", style="cyan", overflow="fold")
    table.add_column("Fav")

    for link in stored:
        title = escape(link.resolved_title) or "[dim italic]untitled[/dim italic]"
        fav = "[yellow]★[/yellow]" if link.favorite else ""
        table.add_row(link.item_id, title, escape(link.url), fav)

    console.print(table)


@click.command("status")
def status_cmd() -> None:
    """Show the stored authorization state (no network access)."""
    from pocketsync.config import (
        ConfigError,
        ConfigMissing,
        get_settings,
        load_credentials,
    )
    from pocketsync.core.auth import auth_state

    settings = get_settings()

    try:
        credentials = load_credentials(settings.config_path)
    except ConfigMissing as e:
        console.print(f"[red]{escape(str(e))}[/red]", soft_wrap=True)
        raise SystemExit(1) from None
    except ConfigError as e:
        console.print(f"[red]Invalid config:[/red] {escape(str(e))}", soft_wrap=True)
        raise SystemExit(1) from None

    def _flag(value: object) -> str:
        return "[green]set[/green]" if value is not None else "[dim]not set[/dim]"

    console.print(f"[bold]Config:[/bold] {settings.config_path}")
    console.print(f"[bold]API endpoint:[/bold] {credentials.api_endpoint}")
    console.print(f"[bold]State:[/bold] {auth_state(credentials).value}")
    console.print(f"  request code:  {_flag(credentials.code)}")
    console.print(f"  access token:  {_flag(credentials.token)}")
    console.print(f"  authorize URL: {_flag(credentials.auth_url)}")
    if credentials.code_valid is None:
        console.print("  last check:    [dim]never[/dim]")
    elif credentials.code_valid:
        console.print("  last check:    [green]valid[/green]")
    else:
        console.print("  last check:    [red]invalid[/red]")
