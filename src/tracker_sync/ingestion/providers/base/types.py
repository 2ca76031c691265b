from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

Json = dict[str, Any]

MAX_RECENT_MATCHES = 5
MAX_UPCOMING_MATCHES = 5


@dataclass(frozen=True)
class DailyUpdateRecord:
    """One athlete's match on a calendar date. `date` is the upsert key."""

    date: date
    opponent: str | None
    competition: str | None
    home_away: str | None
    match_result: str | None
    played: bool
    minutes_played: int | None = None
    rating: float | None = None
    stats: Json = field(default_factory=dict)


@dataclass(frozen=True)
class SeasonStatRecord:
    season: str
    competition: str
    games_played: int = 0
    games_started: int = 0
    stats: Json = field(default_factory=dict)


@dataclass(frozen=True)
class UpcomingMatchRecord:
    match_date: datetime
    opponent: str
    competition: str
    home_away: str | None


@dataclass(frozen=True)
class CanonicalRecords:
    """
    Every provider normalizes into these three shapes, whatever its payload looks like.

    `unavailable` names the sections whose provider request failed. An empty list
    in such a section means "unknown", not "none", and must not replace stored rows.
    """
    daily_updates: list[DailyUpdateRecord] = field(default_factory=list)
    season_stats: list[SeasonStatRecord] = field(default_factory=list)
    upcoming_matches: list[UpcomingMatchRecord] = field(default_factory=list)
    unavailable: frozenset[str] = frozenset()


DAILY_UPDATES = "daily_updates"
SEASON_STATS = "season_stats"
UPCOMING_MATCHES = "upcoming_matches"


def unavailable_sections(sections: dict[str, list[Any] | None]) -> frozenset[str]:
    """Names of the raw sections the adapter could not fetch (marked with None)."""
    return frozenset(name for name, items in sections.items() if items is None)


def format_match_result(home_score: Any, away_score: Any) -> str | None:
    if isinstance(home_score, bool) or isinstance(away_score, bool):
        return None
    if not isinstance(home_score, int) or not isinstance(away_score, int):
        return None
    return f"{home_score}-{away_score}"


def count(value: Any) -> int:
    """Provider counters: missing/null/garbage -> 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


def optional_float(value: Any) -> float | None:
    if value in (None, "") or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def upcoming_after(
    records: list[UpcomingMatchRecord], *, now: datetime
) -> list[UpcomingMatchRecord]:
    """Strictly-future fixtures, soonest first, capped after filtering."""
    future = [r for r in records if r.match_date > now]
    future.sort(key=lambda r: r.match_date)
    return future[:MAX_UPCOMING_MATCHES]
