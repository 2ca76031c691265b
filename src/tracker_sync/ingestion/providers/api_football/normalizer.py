"""Map API-Football payloads onto the canonical tracker records.

Pure functions; the current time is always passed in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tracker_sync.core.text import season_label
from tracker_sync.db.enums import HomeAwayEnum
from tracker_sync.ingestion.dates import parse_provider_datetime
from tracker_sync.ingestion.providers.base.types import (
    DAILY_UPDATES,
    MAX_RECENT_MATCHES,
    UPCOMING_MATCHES,
    CanonicalRecords,
    DailyUpdateRecord,
    SeasonStatRecord,
    UpcomingMatchRecord,
    count,
    format_match_result,
    optional_float,
    unavailable_sections,
    upcoming_after,
)

ApiItem = dict[str, Any]

FINISHED_STATUSES = frozenset({"FT", "AET", "PEN"})


@dataclass(frozen=True)
class ApiFootballRawPayload:
    player_id: int
    season: int
    team_id: int | None
    player: ApiItem
    # None: the fixtures request failed at the provider.
    recent_fixtures: list[ApiItem] | None = field(default_factory=list)
    upcoming_fixtures: list[ApiItem] | None = field(default_factory=list)


def _obj(parent: Any, key: str) -> dict[str, Any]:
    value = parent.get(key) if isinstance(parent, dict) else None
    return value if isinstance(value, dict) else {}


def _kickoff(fixture: ApiItem) -> datetime | None:
    fx = _obj(fixture, "fixture")
    return parse_provider_datetime(fx.get("date")) or parse_provider_datetime(fx.get("timestamp"))


def _side(fixture: ApiItem, team_id: int | None) -> tuple[str, str]:
    """(home_away, opponent) from the tracked team's point of view."""
    teams = _obj(fixture, "teams")
    home = _obj(teams, "home")
    away = _obj(teams, "away")
    is_home = team_id is not None and home.get("id") == team_id
    opponent = away.get("name") if is_home else home.get("name")
    side = HomeAwayEnum.HOME if is_home else HomeAwayEnum.AWAY
    return side.value, opponent or "Unknown"


def normalize_season_stats(player: ApiItem, *, default_season: int) -> list[SeasonStatRecord]:
    records: dict[tuple[str, str], SeasonStatRecord] = {}

    for stat in player.get("statistics") or []:
        if not isinstance(stat, dict):
            continue

        league = _obj(stat, "league")
        games = _obj(stat, "games")
        goals = _obj(stat, "goals")
        passes = _obj(stat, "passes")
        tackles = _obj(stat, "tackles")
        cards = _obj(stat, "cards")
        shots = _obj(stat, "shots")
        dribbles = _obj(stat, "dribbles")

        year = league.get("season")
        season = season_label(year if isinstance(year, int) else default_season)
        competition = league.get("name") or "Unknown"

        # Same competition twice (mid-season transfer): last entry wins, as in the store.
        records[(season, competition)] = SeasonStatRecord(
            season=season,
            competition=competition,
            games_played=count(games.get("appearences")),
            games_started=count(games.get("lineups")),
            stats={
                "goals": count(goals.get("total")),
                "assists": count(goals.get("assists")),
                "minutes": count(games.get("minutes")),
                "yellow_cards": count(cards.get("yellow")),
                "red_cards": count(cards.get("red")),
                "rating": optional_float(games.get("rating")),
                "shots_total": count(shots.get("total")),
                "shots_on_target": count(shots.get("on")),
                "passes_total": count(passes.get("total")),
                "passes_accuracy": count(passes.get("accuracy")),
                "key_passes": count(passes.get("key")),
                "tackles": count(tackles.get("total")),
                "interceptions": count(tackles.get("interceptions")),
                "dribbles_success": count(dribbles.get("success")),
                "dribbles_attempts": count(dribbles.get("attempts")),
            },
        )

    return list(records.values())


def normalize_recent_fixtures(
    fixtures: list[ApiItem], *, team_id: int | None
) -> list[DailyUpdateRecord]:
    dated: list[tuple[datetime, ApiItem]] = []
    for fixture in fixtures:
        kickoff = _kickoff(fixture)
        # The calendar date is the upsert key; undated fixtures cannot be stored.
        if kickoff is None:
            continue
        dated.append((kickoff, fixture))

    dated.sort(key=lambda pair: pair[0], reverse=True)

    records: list[DailyUpdateRecord] = []
    for kickoff, fixture in dated[:MAX_RECENT_MATCHES]:
        home_away, opponent = _side(fixture, team_id)
        goals = _obj(fixture, "goals")
        status = _obj(_obj(fixture, "fixture"), "status")
        records.append(
            DailyUpdateRecord(
                date=kickoff.date(),
                opponent=opponent,
                competition=_obj(fixture, "league").get("name") or "Unknown",
                home_away=home_away,
                match_result=format_match_result(goals.get("home"), goals.get("away")),
                played=status.get("short") in FINISHED_STATUSES,
                # Team fixtures carry no player-level minutes/rating.
                minutes_played=None,
                rating=None,
                stats={},
            )
        )
    return records


def normalize_upcoming_fixtures(
    fixtures: list[ApiItem], *, team_id: int | None, now: datetime
) -> list[UpcomingMatchRecord]:
    records: list[UpcomingMatchRecord] = []
    for fixture in fixtures:
        kickoff = _kickoff(fixture)
        if kickoff is None:
            continue
        home_away, opponent = _side(fixture, team_id)
        records.append(
            UpcomingMatchRecord(
                match_date=kickoff,
                opponent=opponent,
                competition=_obj(fixture, "league").get("name") or "Unknown",
                home_away=home_away,
            )
        )
    return upcoming_after(records, now=now)


def normalize_api_football_payload(raw: ApiFootballRawPayload, *, now: datetime) -> CanonicalRecords:
    return CanonicalRecords(
        daily_updates=normalize_recent_fixtures(raw.recent_fixtures or [], team_id=raw.team_id),
        season_stats=normalize_season_stats(raw.player, default_season=raw.season),
        upcoming_matches=normalize_upcoming_fixtures(
            raw.upcoming_fixtures or [], team_id=raw.team_id, now=now
        ),
        unavailable=unavailable_sections(
            {DAILY_UPDATES: raw.recent_fixtures, UPCOMING_MATCHES: raw.upcoming_fixtures}
        ),
    )
