from __future__ import annotations

from typing import Any

import httpx
import pytest
from sqlalchemy.orm import Session

from conftest import add_athlete
from tracker_sync.db.enums import SportEnum
from tracker_sync.db.repos.athlete_repo import AthleteRepository
from tracker_sync.ingestion.discovery import (
    DiscoveryTarget,
    discover_balldontlie_id,
    match_player,
)
from tracker_sync.ingestion.providers.balldontlie.adapter import BalldontlieAdapter
from tracker_sync.ingestion.providers.balldontlie.client import BalldontlieClient
from tracker_sync.ingestion.providers.base.client import BaseHttpClient
from tracker_sync.ingestion.providers.base.errors import ProviderRequestError

SENGUN = {
    "id": 3547254,
    "first_name": "Alperen",
    "last_name": "Sengun",
    "position": "C",
    "jersey_number": "28",
    "team": {"id": 11, "full_name": "Houston Rockets"},
}


def _adapter(handler: Any) -> BalldontlieAdapter:
    http = BaseHttpClient(
        base_url="https://api.balldontlie.io/v1", transport=httpx.MockTransport(handler)
    )
    return BalldontlieAdapter(client=BalldontlieClient(http=http, api_key="k"), season=2024)


def _search_returning(players: list[dict[str, Any]]) -> Any:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/players"
        assert request.url.params["search"] == "Sengun"
        return httpx.Response(200, json={"data": players})

    return handler


def test_match_player_checks_name_fragments_case_insensitively() -> None:
    target = DiscoveryTarget()
    other = {"id": 1, "first_name": "Someone", "last_name": "Else"}

    assert match_player([other, {"id": 2, "first_name": "X", "last_name": "ŞENGUN"}], target) is None
    assert match_player([other, {"id": 3, "first_name": "ALPEREN", "last_name": None}], target)["id"] == 3
    assert match_player([other, SENGUN], target) is SENGUN


def test_discovery_stores_id_on_matching_athlete(session: Session) -> None:
    add_athlete(session, slug="alperen-sengun", name="Alperen Şengün", sport=SportEnum.BASKETBALL)

    result = discover_balldontlie_id(session, _adapter(_search_returning([SENGUN])))

    assert result.success
    assert result.updated
    assert result.to_dict()["player"] == {
        "id": 3547254,
        "first_name": "Alperen",
        "last_name": "Sengun",
        "team": "Houston Rockets",
        "position": "C",
        "jersey_number": "28",
    }
    assert "3547254" in result.message
    session.expire_all()
    assert AthleteRepository(session).get_by_slug("alperen-sengun").balldontlie_id == 3547254


def test_discovery_without_match_returns_raw_results(session: Session) -> None:
    other = {"id": 1, "first_name": "Someone", "last_name": "Else"}

    result = discover_balldontlie_id(session, _adapter(_search_returning([other])))

    assert result.to_dict() == {
        "success": False,
        "message": "Sengun not found in search results",
        "raw_data": {"data": [other]},
    }


def test_discovery_with_unknown_slug_still_reports_player(session: Session) -> None:
    target = DiscoveryTarget(slug="missing")

    result = discover_balldontlie_id(session, _adapter(_search_returning([SENGUN])), target)

    assert result.success
    assert not result.updated


def test_discovery_propagates_provider_failures(session: Session) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, text="Unauthorized")

    with pytest.raises(ProviderRequestError):
        discover_balldontlie_id(session, _adapter(handler))
