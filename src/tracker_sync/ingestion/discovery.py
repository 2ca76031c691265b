from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from tracker_sync.db.enums import ProviderEnum
from tracker_sync.db.repos.athlete_repo import AthleteRepository
from tracker_sync.ingestion.providers.balldontlie.adapter import BalldontlieAdapter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveryTarget:
    search: str = "Sengun"
    slug: str = "alperen-sengun"
    first_name: str = "alperen"
    last_name: str = "sengun"

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".title()


@dataclass
class DiscoveryResult:
    success: bool
    message: str
    player: dict[str, Any] | None = None
    raw_data: dict[str, Any] | None = None
    updated: bool = False

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "player": self.player, "message": self.message}
        return {"success": False, "message": self.message, "raw_data": self.raw_data}


def match_player(items: list[dict[str, Any]], target: DiscoveryTarget) -> dict[str, Any] | None:
    """First player whose last name or first name contains the target fragment."""
    last = target.last_name.lower()
    first = target.first_name.lower()
    for player in items:
        last_name = str(player.get("last_name") or "").lower()
        first_name = str(player.get("first_name") or "").lower()
        if last in last_name or first in first_name:
            return player
    return None


def _player_summary(player: dict[str, Any]) -> dict[str, Any]:
    team = player.get("team") if isinstance(player.get("team"), dict) else {}
    return {
        "id": player.get("id"),
        "first_name": player.get("first_name"),
        "last_name": player.get("last_name"),
        "team": team.get("full_name"),
        "position": player.get("position"),
        "jersey_number": player.get("jersey_number"),
    }


def discover_balldontlie_id(
    session: Session,
    adapter: BalldontlieAdapter,
    target: DiscoveryTarget | None = None,
) -> DiscoveryResult:
    """
    Search balldontlie for `target` and store the matched player id on the
    athlete row identified by `target.slug`.

    Provider failures propagate (ProviderError); a missing athlete row is
    logged and reported but still counts as a successful discovery.
    """
    target = target or DiscoveryTarget()
    logger.info("searching balldontlie", extra={"search": target.search})

    items = adapter.search_players(target.search)
    player = match_player(items, target)
    if player is None:
        logger.info("no balldontlie match", extra={"search": target.search, "results": len(items)})
        return DiscoveryResult(
            success=False,
            message=f"{target.search} not found in search results",
            raw_data={"data": items},
        )

    player_id = int(player["id"])
    athletes = AthleteRepository(session)
    athlete = athletes.get_by_slug(target.slug)
    updated = False
    if athlete is None:
        logger.error("athlete slug not found", extra={"slug": target.slug})
    else:
        athletes.set_provider_id(athlete, ProviderEnum.BALLDONTLIE, player_id)
        session.commit()
        updated = True
        logger.info(
            "stored balldontlie id",
            extra={"slug": target.slug, "provider_player_id": player_id},
        )

    message = f"Found {target.display_name} with ID: {player_id}."
    if updated:
        message += " Updated athlete_profiles table."
    return DiscoveryResult(
        success=True,
        message=message,
        player=_player_summary(player),
        updated=updated,
    )
