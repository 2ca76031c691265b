from __future__ import annotations

import json

import typer

from tracker_sync.cli.common import session_scope
from tracker_sync.core.config import ConfigurationError
from tracker_sync.db.enums import SportEnum
from tracker_sync.ingestion.jobs import run_sport_sync
from tracker_sync.ingestion.orchestrator import SyncRunResult

app = typer.Typer(help="Run a sport's stats sync against its provider.", no_args_is_help=True)


def _run(sport: SportEnum, delay_seconds: float | None, as_json: bool) -> None:
    try:
        with session_scope() as session:
            run = run_sport_sync(session, sport, delay_seconds=delay_seconds)
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(code=2) from e

    _echo_run(run, as_json=as_json)


def _echo_run(run: SyncRunResult, *, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(run.to_dict(), indent=2))
        return

    for r in run.results:
        line = (
            f"{r.athlete}: {r.status.value} "
            f"matches={r.matches_processed} season_stats={r.season_stats} "
            f"upcoming={r.upcoming_matches}"
        )
        if r.error:
            line += f" error={r.error}"
        typer.echo(line)

    # Per-athlete errors are reported above; a completed run exits 0.
    counts = run.counts()
    typer.echo(
        f"{run.api} {run.sport.value}: athletes={len(run.results)} "
        + " ".join(f"{k}={v}" for k, v in sorted(counts.items()))
    )


@app.command("football")
def sync_football_cmd(
    delay_seconds: float | None = typer.Option(
        None, "--delay-seconds", help="Pause between athletes (defaults to SYNC_DELAY_SECONDS)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the run result as JSON."),
) -> None:
    """Sync football athletes from API-Football."""
    _run(SportEnum.FOOTBALL, delay_seconds, as_json)


@app.command("basketball")
def sync_basketball_cmd(
    delay_seconds: float | None = typer.Option(
        None, "--delay-seconds", help="Pause between athletes (defaults to SYNC_DELAY_SECONDS)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the run result as JSON."),
) -> None:
    """Sync basketball athletes from balldontlie."""
    _run(SportEnum.BASKETBALL, delay_seconds, as_json)
