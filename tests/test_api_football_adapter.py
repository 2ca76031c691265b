from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import httpx
import pytest

from tracker_sync.ingestion.providers.api_football.adapter import ApiFootballAdapter
from tracker_sync.ingestion.providers.api_football.client import ApiFootballClient
from tracker_sync.ingestion.providers.base.client import BaseHttpClient
from tracker_sync.ingestion.providers.base.errors import ProviderRequestError

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _ok(response: list[dict[str, Any]]) -> httpx.Response:
    return httpx.Response(200, json={"errors": [], "response": response})


def _adapter(handler: Any, team_ids: dict[str, int] | None = None) -> ApiFootballAdapter:
    http = BaseHttpClient(
        base_url="https://v3.football.api-sports.io", transport=httpx.MockTransport(handler)
    )
    client = ApiFootballClient(http=http, api_key="k", _sleep=lambda s: None)
    return ApiFootballAdapter(client=client, season=2024, team_ids=team_ids or {"Real Madrid": 541})


def test_search_player_returns_first_result() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/players"
        assert request.url.params["season"] == "2024"
        return _ok([{"player": {"id": 762}}, {"player": {"id": 999}}])

    assert _adapter(handler).search_player("Arda Guler") == 762


def test_search_player_is_soft_on_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    assert _adapter(handler).search_player("Arda Guler") is None


def test_fetch_raw_returns_none_on_http_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    assert _adapter(handler).fetch_raw(762, team="Real Madrid") is None


def test_fetch_raw_returns_none_when_player_has_no_data() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return _ok([])

    assert _adapter(handler).fetch_raw(762, team="Real Madrid") is None


def test_fetch_raw_uses_static_team_table_and_fetches_fixtures() -> None:
    paths: list[tuple[str, dict[str, str]]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append((request.url.path, dict(request.url.params)))
        if request.url.path == "/players":
            return _ok([{"player": {"id": 762}, "statistics": []}])
        if request.url.path == "/fixtures":
            return _ok([{"fixture": {"id": 1}}])
        raise AssertionError(f"unexpected request {request.url}")

    raw = _adapter(handler).fetch_raw(762, team="Real Madrid")

    assert raw is not None
    assert raw.team_id == 541
    assert raw.recent_fixtures == [{"fixture": {"id": 1}}]
    assert raw.upcoming_fixtures == [{"fixture": {"id": 1}}]
    assert ("/fixtures", {"team": "541", "last": "5"}) in paths
    assert ("/fixtures", {"team": "541", "next": "5"}) in paths
    assert all(p != "/teams" for p, _ in paths)


def test_fixture_failures_do_not_drop_player_data() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/players":
            return _ok([{"player": {"id": 762}}])
        return httpx.Response(500, text="fixtures down")

    raw = _adapter(handler).fetch_raw(762, team="Real Madrid")

    assert raw is not None
    assert raw.player == {"player": {"id": 762}}
    assert raw.recent_fixtures is None
    assert raw.upcoming_fixtures is None
    assert _adapter(handler).normalize(raw, now=NOW).unavailable == {
        "daily_updates",
        "upcoming_matches",
    }


def test_team_lookup_falls_back_to_search_and_caches() -> None:
    team_searches: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/teams":
            team_searches.append(request.url.params["search"])
            if request.url.params["search"] == "Galatasaray":
                return _ok([{"team": {"id": 645}}])
            return _ok([])
        raise AssertionError(f"unexpected request {request.url}")

    adapter = _adapter(handler)

    assert adapter.team_lookup.resolve("Galatasaray") == 645
    assert adapter.team_lookup.resolve("galatasaray") == 645
    assert adapter.team_lookup.resolve("Nowhere FC") is None
    assert adapter.team_lookup.resolve("Nowhere FC") is None
    # Table hits never search.
    assert adapter.team_lookup.resolve("REAL MADRID") == 541
    assert adapter.team_lookup.resolve(None) is None

    assert team_searches == ["Galatasaray", "Nowhere FC"]


def test_team_search_failure_is_not_cached() -> None:
    team_searches: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/teams":
            team_searches.append(request.url.params["search"])
            if len(team_searches) == 1:
                return httpx.Response(503, text="unavailable")
            return _ok([{"team": {"id": 487}}])
        raise AssertionError(f"unexpected request {request.url}")

    adapter = _adapter(handler)

    with pytest.raises(ProviderRequestError):
        adapter.team_lookup.resolve("Lazio")
    assert adapter.team_lookup.resolve("Lazio") == 487
    assert adapter.team_lookup.resolve("Lazio") == 487

    assert team_searches == ["Lazio", "Lazio"]


def test_fetch_raw_marks_fixtures_unknown_when_team_search_fails() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/players":
            return _ok([{"player": {"id": 762}}])
        if request.url.path == "/teams":
            return httpx.Response(503, text="unavailable")
        raise AssertionError(f"unexpected request {request.url}")

    raw = _adapter(handler).fetch_raw(762, team="Lazio")

    assert raw is not None
    assert raw.team_id is None
    assert raw.recent_fixtures is None
    assert raw.upcoming_fixtures is None


def test_unknown_team_means_no_fixtures_rather_than_unknown() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/players":
            return _ok([{"player": {"id": 762}}])
        if request.url.path == "/teams":
            return _ok([])
        raise AssertionError(f"unexpected request {request.url}")

    adapter = _adapter(handler)
    raw = adapter.fetch_raw(762, team="Nowhere FC")

    assert raw is not None
    assert raw.upcoming_fixtures == []
    assert adapter.normalize(raw, now=NOW).unavailable == frozenset()
