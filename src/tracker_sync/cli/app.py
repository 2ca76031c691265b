from __future__ import annotations

import typer
import uvicorn

from tracker_sync.cli.discover import app as discover_app
from tracker_sync.cli.sync import app as sync_app
from tracker_sync.core.config import settings
from tracker_sync.core.logging_config import configure_logging

app = typer.Typer(no_args_is_help=True)
app.add_typer(sync_app, name="sync")
app.add_typer(discover_app, name="discover")


@app.callback()
def main(
    log_level: str | None = typer.Option(None, "--log-level", help="Overrides LOG_LEVEL."),
) -> None:
    configure_logging("tracker-sync", settings.environment, log_level or settings.log_level)


@app.command("serve")
def serve_cmd(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
) -> None:
    """Serve the HTTP trigger endpoints."""
    uvicorn.run("tracker_sync.api.app:app", host=host, port=port)
