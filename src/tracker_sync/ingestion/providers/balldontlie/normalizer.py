"""Map balldontlie (NBA) payloads onto the canonical tracker records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tracker_sync.core.text import season_label
from tracker_sync.db.enums import HomeAwayEnum
from tracker_sync.ingestion.dates import parse_provider_date, parse_provider_datetime
from tracker_sync.ingestion.providers.base.types import (
    DAILY_UPDATES,
    MAX_RECENT_MATCHES,
    SEASON_STATS,
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

REGULAR_SEASON = "NBA"
PLAYOFFS = "NBA Playoffs"


@dataclass(frozen=True)
class BalldontlieRawPayload:
    player_id: int
    season: int
    team_id: int | None
    player: ApiItem
    # None: that request failed at the provider.
    game_stats: list[ApiItem] | None = field(default_factory=list)
    season_averages: list[ApiItem] | None = field(default_factory=list)
    upcoming_games: list[ApiItem] | None = field(default_factory=list)
    team_names: dict[int, str] = field(default_factory=dict)


def parse_minutes(value: Any) -> int | None:
    """`"32:14"` / `"32"` / `32` -> 32. Missing -> None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if not isinstance(value, str) or not value.strip():
        return None
    head = value.strip().split(":", 1)[0]
    try:
        return int(float(head))
    except ValueError:
        return None


def _average_minutes(value: Any) -> float:
    if isinstance(value, str) and ":" in value:
        mins, _, secs = value.partition(":")
        try:
            return round(int(mins) + int(secs) / 60.0, 1)
        except ValueError:
            return 0.0
    return optional_float(value) or 0.0


def _avg(value: Any) -> float:
    return optional_float(value) or 0.0


def _competition(game: ApiItem) -> str:
    return PLAYOFFS if game.get("postseason") else REGULAR_SEASON


def _kickoff(game: ApiItem) -> datetime | None:
    return parse_provider_datetime(game.get("datetime")) or parse_provider_datetime(game.get("date"))


def normalize_game_stats(
    items: list[ApiItem], *, team_names: dict[int, str]
) -> list[DailyUpdateRecord]:
    dated: list[tuple[datetime, ApiItem]] = []
    for item in items:
        game = item.get("game")
        if not isinstance(game, dict):
            continue
        kickoff = _kickoff(game)
        if kickoff is None:
            continue
        dated.append((kickoff, item))

    dated.sort(key=lambda pair: pair[0], reverse=True)

    records: list[DailyUpdateRecord] = []
    for kickoff, item in dated[:MAX_RECENT_MATCHES]:
        game = item["game"]
        team = item.get("team") if isinstance(item.get("team"), dict) else {}
        is_home = team.get("id") is not None and team.get("id") == game.get("home_team_id")
        opponent_id = game.get("visitor_team_id") if is_home else game.get("home_team_id")
        minutes = parse_minutes(item.get("min"))

        # `date` is the US calendar day; `datetime` is the UTC tip-off.
        game_day = parse_provider_date(game.get("date")) or kickoff.date()

        records.append(
            DailyUpdateRecord(
                date=game_day,
                opponent=team_names.get(opponent_id, "Unknown"),
                competition=_competition(game),
                home_away=(HomeAwayEnum.HOME if is_home else HomeAwayEnum.AWAY).value,
                match_result=format_match_result(
                    game.get("home_team_score"), game.get("visitor_team_score")
                ),
                played=bool(minutes),
                minutes_played=minutes,
                rating=None,
                stats={
                    "points": count(item.get("pts")),
                    "rebounds": count(item.get("reb")),
                    "assists": count(item.get("ast")),
                    "steals": count(item.get("stl")),
                    "blocks": count(item.get("blk")),
                    "turnovers": count(item.get("turnover")),
                    "fg_pct": _avg(item.get("fg_pct")),
                    "fg3_pct": _avg(item.get("fg3_pct")),
                    "ft_pct": _avg(item.get("ft_pct")),
                },
            )
        )
    return records


def normalize_season_averages(items: list[ApiItem], *, default_season: int) -> list[SeasonStatRecord]:
    records: dict[str, SeasonStatRecord] = {}
    for item in items:
        year = item.get("season")
        season = season_label(year if isinstance(year, int) else default_season)
        records[season] = SeasonStatRecord(
            season=season,
            competition=REGULAR_SEASON,
            games_played=count(item.get("games_played")),
            # Not reported by the season averages endpoint.
            games_started=0,
            stats={
                "minutes": _average_minutes(item.get("min")),
                "points": _avg(item.get("pts")),
                "rebounds": _avg(item.get("reb")),
                "assists": _avg(item.get("ast")),
                "steals": _avg(item.get("stl")),
                "blocks": _avg(item.get("blk")),
                "turnovers": _avg(item.get("turnover")),
                "fg_pct": _avg(item.get("fg_pct")),
                "fg3_pct": _avg(item.get("fg3_pct")),
                "ft_pct": _avg(item.get("ft_pct")),
            },
        )
    return list(records.values())


def normalize_upcoming_games(
    games: list[ApiItem], *, team_id: int | None, now: datetime
) -> list[UpcomingMatchRecord]:
    records: list[UpcomingMatchRecord] = []
    for game in games:
        kickoff = _kickoff(game)
        if kickoff is None:
            continue
        home = game.get("home_team") if isinstance(game.get("home_team"), dict) else {}
        visitor = game.get("visitor_team") if isinstance(game.get("visitor_team"), dict) else {}
        is_home = team_id is not None and home.get("id") == team_id
        opponent = visitor if is_home else home
        records.append(
            UpcomingMatchRecord(
                match_date=kickoff,
                opponent=opponent.get("full_name") or opponent.get("name") or "Unknown",
                competition=_competition(game),
                home_away=(HomeAwayEnum.HOME if is_home else HomeAwayEnum.AWAY).value,
            )
        )
    return upcoming_after(records, now=now)


def normalize_balldontlie_payload(raw: BalldontlieRawPayload, *, now: datetime) -> CanonicalRecords:
    return CanonicalRecords(
        daily_updates=normalize_game_stats(raw.game_stats or [], team_names=raw.team_names),
        season_stats=normalize_season_averages(raw.season_averages or [], default_season=raw.season),
        upcoming_matches=normalize_upcoming_games(
            raw.upcoming_games or [], team_id=raw.team_id, now=now
        ),
        unavailable=unavailable_sections(
            {
                DAILY_UPDATES: raw.game_stats,
                SEASON_STATS: raw.season_averages,
                UPCOMING_MATCHES: raw.upcoming_games,
            }
        ),
    )
