from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tracker_sync.db.enums import ProviderEnum, SportEnum
from tracker_sync.ingestion.providers.api_football.client import ApiFootballClient
from tracker_sync.ingestion.providers.api_football.normalizer import (
    ApiFootballRawPayload,
    normalize_api_football_payload,
)
from tracker_sync.ingestion.providers.base.errors import ProviderError
from tracker_sync.ingestion.providers.base.team_lookup import TeamIdLookup
from tracker_sync.ingestion.providers.base.types import (
    MAX_RECENT_MATCHES,
    MAX_UPCOMING_MATCHES,
    CanonicalRecords,
)

logger = logging.getLogger(__name__)


def _positive_int(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool) and value > 0:
        return value
    return None


@dataclass
class ApiFootballAdapter:
    """
    API-Football (api-sports v3) adapter for football athletes.

    Season stats come from the player endpoint; recent and upcoming matches are
    team fixtures, so the athlete's team name is resolved to a provider team id
    through the injected name->id table with a remote-search fallback.
    """

    client: ApiFootballClient
    season: int
    team_ids: Mapping[str, int] = field(default_factory=dict)

    provider: ProviderEnum = ProviderEnum.API_FOOTBALL
    sport: SportEnum = SportEnum.FOOTBALL
    label: str = "API-Football"

    def __post_init__(self) -> None:
        self.team_lookup = TeamIdLookup(table=self.team_ids, search=self.search_team)

    # -----------------------------
    # Discovery
    # -----------------------------

    def search_player(self, name: str) -> int | None:
        try:
            items = self.client.get_response_items(
                "/players", params={"search": name, "season": str(self.season)}
            )
        except ProviderError as e:
            logger.error("api-football player search failed", extra={"search": name, "error": str(e)})
            return None

        # First result wins; there is no disambiguation step.
        found = _positive_int((items[0].get("player") or {}).get("id")) if items else None
        if found is None:
            logger.info("api-football player search had no match", extra={"search": name})
        return found

    def search_team(self, name: str) -> int | None:
        """First matching team id, or None when the search is empty. Raises ProviderError."""
        items = self.client.get_response_items("/teams", params={"search": name})
        if not items:
            return None
        return _positive_int((items[0].get("team") or {}).get("id"))

    # -----------------------------
    # Fetch
    # -----------------------------

    def _fixtures(self, team_id: int | None, **window: int) -> list[dict[str, Any]] | None:
        """Team fixtures, or None when the request failed."""
        if team_id is None:
            return []
        try:
            return self.client.get_response_items("/fixtures", params={"team": team_id, **window})
        except ProviderError as e:
            logger.warning(
                "api-football fixtures fetch failed",
                extra={"team_id": team_id, "window": window, "error": str(e)},
            )
            return None

    def fetch_raw(self, provider_player_id: int, *, team: str | None = None) -> ApiFootballRawPayload | None:
        try:
            items = self.client.get_response_items(
                "/players", params={"id": provider_player_id, "season": str(self.season)}
            )
        except ProviderError as e:
            logger.error(
                "api-football player fetch failed",
                extra={"player_id": provider_player_id, "error": str(e)},
            )
            return None

        if not items:
            logger.info("api-football returned no player data", extra={"player_id": provider_player_id})
            return None

        try:
            team_id = self.team_lookup.resolve(team)
        except ProviderError as e:
            logger.warning("api-football team search failed", extra={"team": team, "error": str(e)})
            # Fixtures are unknown, not empty.
            return ApiFootballRawPayload(
                player_id=provider_player_id,
                season=self.season,
                team_id=None,
                player=items[0],
                recent_fixtures=None,
                upcoming_fixtures=None,
            )

        return ApiFootballRawPayload(
            player_id=provider_player_id,
            season=self.season,
            team_id=team_id,
            player=items[0],
            recent_fixtures=self._fixtures(team_id, last=MAX_RECENT_MATCHES),
            upcoming_fixtures=self._fixtures(team_id, next=MAX_UPCOMING_MATCHES),
        )

    def normalize(self, raw: ApiFootballRawPayload, *, now: datetime) -> CanonicalRecords:
        return normalize_api_football_payload(raw, now=now)

    def close(self) -> None:
        self.client.close()
