from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Callable

from tracker_sync.db.enums import ProviderEnum, SportEnum
from tracker_sync.ingestion.providers.balldontlie.client import BalldontlieClient
from tracker_sync.ingestion.providers.balldontlie.normalizer import (
    BalldontlieRawPayload,
    normalize_balldontlie_payload,
)
from tracker_sync.ingestion.providers.base.errors import ProviderError
from tracker_sync.ingestion.providers.base.types import CanonicalRecords

logger = logging.getLogger(__name__)

STATS_PAGE_SIZE = 100
# 82 regular-season games plus playoffs fit in two pages.
STATS_MAX_PAGES = 3
UPCOMING_PAGE_SIZE = 25


@dataclass
class BalldontlieAdapter:
    """
    balldontlie (NBA) adapter for basketball athletes.

    The player's team of record comes from the player resource, so no team-name
    lookup is needed; team names for opponents are loaded once per run.
    """

    client: BalldontlieClient
    season: int

    provider: ProviderEnum = ProviderEnum.BALLDONTLIE
    sport: SportEnum = SportEnum.BASKETBALL
    label: str = "balldontlie"

    _now: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC), repr=False)
    _team_names: dict[int, str] | None = field(default=None, init=False, repr=False)

    # -----------------------------
    # Discovery
    # -----------------------------

    def search_players(self, term: str) -> list[dict[str, Any]]:
        """Raw search results; raises ProviderError."""
        return self.client.get_items("/players", params={"search": term})

    def search_player(self, name: str) -> int | None:
        try:
            items = self.search_players(name)
            # The search endpoint matches a single first- or last-name term.
            parts = name.split()
            if not items and len(parts) > 1:
                items = self.search_players(parts[-1])
        except ProviderError as e:
            logger.error("balldontlie player search failed", extra={"search": name, "error": str(e)})
            return None

        # First result wins; there is no disambiguation step.
        if not items:
            logger.info("balldontlie player search had no match", extra={"search": name})
            return None
        player_id = items[0].get("id")
        return player_id if isinstance(player_id, int) and player_id > 0 else None

    # -----------------------------
    # Fetch
    # -----------------------------

    def team_names(self) -> dict[int, str]:
        if self._team_names is None:
            try:
                teams = self.client.get_items("/teams", params={"per_page": 100})
            except ProviderError as e:
                logger.warning("balldontlie teams fetch failed", extra={"error": str(e)})
                return {}
            self._team_names = {
                int(t["id"]): str(t.get("full_name") or t.get("name") or t["id"])
                for t in teams
                if isinstance(t.get("id"), int)
            }
        return self._team_names

    def _optional_items(
        self, path: str, params: dict[str, Any], *, all_pages: bool = False
    ) -> list[dict[str, Any]] | None:
        """Items, or None when the request failed (stored rows for that section are kept)."""
        try:
            if all_pages:
                return self.client.get_all_items(path, params=params, max_pages=STATS_MAX_PAGES)
            return self.client.get_items(path, params=params)
        except ProviderError as e:
            logger.warning(
                "balldontlie fetch failed", extra={"path": path, "params": params, "error": str(e)}
            )
            return None

    def fetch_raw(self, provider_player_id: int, *, team: str | None = None) -> BalldontlieRawPayload | None:
        try:
            player = self.client.get_item(f"/players/{provider_player_id}")
        except ProviderError as e:
            logger.error(
                "balldontlie player fetch failed",
                extra={"player_id": provider_player_id, "error": str(e)},
            )
            return None

        team_obj = player.get("team") if isinstance(player.get("team"), dict) else {}
        team_id = team_obj.get("id") if isinstance(team_obj.get("id"), int) else None

        # Row order of /stats is not guaranteed, so the whole season is read and the
        # normalizer picks the latest games by date.
        game_stats = self._optional_items(
            "/stats",
            {
                "player_ids[]": [provider_player_id],
                "seasons[]": [self.season],
                "per_page": STATS_PAGE_SIZE,
            },
            all_pages=True,
        )
        season_averages = self._optional_items(
            "/season_averages", {"season": self.season, "player_id": provider_player_id}
        )
        upcoming_games: list[dict[str, Any]] | None = []
        if team_id is not None:
            upcoming_games = self._optional_items(
                "/games",
                {
                    "team_ids[]": [team_id],
                    "start_date": self._now().date().isoformat(),
                    "per_page": UPCOMING_PAGE_SIZE,
                },
            )

        return BalldontlieRawPayload(
            player_id=provider_player_id,
            season=self.season,
            team_id=team_id,
            player=player,
            game_stats=game_stats,
            season_averages=season_averages,
            upcoming_games=upcoming_games,
            team_names=self.team_names(),
        )

    def normalize(self, raw: BalldontlieRawPayload, *, now: datetime) -> CanonicalRecords:
        return normalize_balldontlie_payload(raw, now=now)

    def close(self) -> None:
        self.client.close()
