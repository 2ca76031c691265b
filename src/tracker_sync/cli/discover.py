from __future__ import annotations

import json

import typer

from tracker_sync.cli.common import session_scope
from tracker_sync.core.config import ConfigurationError, settings
from tracker_sync.ingestion.discovery import DiscoveryTarget, discover_balldontlie_id
from tracker_sync.ingestion.providers.balldontlie.provider import build_balldontlie_adapter
from tracker_sync.ingestion.providers.base.errors import ProviderError

app = typer.Typer(help="Look up provider ids for athletes.", no_args_is_help=True)


@app.command("balldontlie-id")
def discover_balldontlie_id_cmd(
    search: str = typer.Option("Sengun", "--search", help="balldontlie player search term."),
    slug: str = typer.Option("alperen-sengun", "--slug", help="Athlete slug to update."),
    first_name: str = typer.Option("alperen", "--first-name", help="First-name fragment to match."),
    last_name: str = typer.Option("sengun", "--last-name", help="Last-name fragment to match."),
) -> None:
    """Find a player's balldontlie id and store it on the athlete."""
    target = DiscoveryTarget(search=search, slug=slug, first_name=first_name, last_name=last_name)
    try:
        adapter = build_balldontlie_adapter(settings)
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2) from e

    try:
        with session_scope() as session:
            result = discover_balldontlie_id(session, adapter, target)
    except ProviderError as e:
        typer.echo(f"balldontlie request failed: {e}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        adapter.close()

    typer.echo(json.dumps(result.to_dict(), indent=2, default=str))
    if not result.success:
        raise typer.Exit(code=1)
