from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import Any

import httpx
import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from conftest import add_athlete
from fakes import FakeProvider
from tracker_sync.core.config import ConfigurationError, Settings
from tracker_sync.db import DatabaseConfig, create_db_engine, create_session_factory
from tracker_sync.db.enums import SportEnum, SyncStatusEnum
from tracker_sync.db.models.ingestion.ingested_payload import IngestedPayload
from tracker_sync.db.repos.athlete_repo import AthleteRepository
from tracker_sync.db.repos.daily_update_repo import DailyUpdateRepository
from tracker_sync.db.repos.season_stat_repo import SeasonStatRepository
from tracker_sync.db.repos.upcoming_match_repo import UpcomingMatchRepository
from tracker_sync.ingestion.jobs import run_sport_sync
from tracker_sync.ingestion.orchestrator import SyncOrchestrator
from tracker_sync.ingestion.providers.api_football.adapter import ApiFootballAdapter
from tracker_sync.ingestion.providers.api_football.client import ApiFootballClient
from tracker_sync.ingestion.providers.base.client import BaseHttpClient
from tracker_sync.ingestion.providers.base.registry import AdapterRegistry
from tracker_sync.ingestion.providers.base.types import (
    CanonicalRecords,
    DailyUpdateRecord,
    SeasonStatRecord,
    UpcomingMatchRecord,
)
from tracker_sync.ingestion.writer import ReconciliationWriter

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def _records(opponent: str = "Barcelona") -> CanonicalRecords:
    return CanonicalRecords(
        daily_updates=[
            DailyUpdateRecord(
                date=date(2025, 2, 20),
                opponent=opponent,
                competition="La Liga",
                home_away="home",
                match_result="2-1",
                played=True,
            )
        ],
        season_stats=[SeasonStatRecord("2024/25", "La Liga", 20, 12, {"goals": 4})],
        upcoming_matches=[
            UpcomingMatchRecord(NOW + timedelta(days=d), "Sevilla", "La Liga", "away")
            for d in (2, 9)
        ],
    )


def _orchestrator(session: Session, provider: FakeProvider, **kwargs: Any) -> SyncOrchestrator:
    kwargs.setdefault("sleep", lambda s: None)
    return SyncOrchestrator(session, provider, clock=lambda: NOW, **kwargs)


def test_missing_id_is_discovered_persisted_and_synced(session: Session) -> None:
    athlete = add_athlete(
        session, slug="arda-guler", name="Arda Güler", sport=SportEnum.FOOTBALL, team="Real Madrid"
    )
    provider = FakeProvider(
        search_results={"Arda Güler": 762},
        payloads={762: {"id": 762}},
        records={762: _records()},
    )

    run = _orchestrator(session, provider).run()

    (result,) = run.results
    assert result.status == SyncStatusEnum.SUCCESS
    assert result.matches_processed == 1
    assert result.season_stats == 1
    assert result.upcoming_matches == 2
    assert result.error is None
    assert provider.searches == ["Arda Güler"]
    assert provider.fetches == [762]

    session.expire_all()
    assert AthleteRepository(session).get_by_slug("arda-guler").api_football_id == 762
    assert len(DailyUpdateRepository(session).list_for_athlete(athlete.id)) == 1
    assert len(SeasonStatRepository(session).list_for_athlete(athlete.id)) == 1
    assert len(UpcomingMatchRepository(session).list_for_athlete(athlete.id)) == 2
    payloads = session.execute(select(IngestedPayload)).scalars().all()
    assert [(p.entity_key, p.athlete_id) for p in payloads] == [("762", athlete.id)]


def test_fetch_without_data_reports_no_data_and_writes_nothing(session: Session) -> None:
    athlete = add_athlete(
        session, slug="a", name="A", sport=SportEnum.FOOTBALL, api_football_id=5
    )
    provider = FakeProvider()

    (result,) = _orchestrator(session, provider).run().results

    assert result.status == SyncStatusEnum.NO_DATA
    assert result.to_dict() == {
        "athlete": "A",
        "status": "no_data",
        "matches_processed": 0,
        "upcoming_matches": 0,
        "season_stats": 0,
    }
    assert DailyUpdateRepository(session).list_for_athlete(athlete.id) == []
    assert UpcomingMatchRepository(session).list_for_athlete(athlete.id) == []


def test_search_miss_reports_not_found(session: Session) -> None:
    add_athlete(session, slug="a", name="A", sport=SportEnum.FOOTBALL)
    provider = FakeProvider()

    (result,) = _orchestrator(session, provider).run().results

    assert result.status == SyncStatusEnum.NOT_FOUND
    assert provider.fetches == []


def test_write_failure_marks_athlete_error_and_run_continues(session: Session) -> None:
    add_athlete(session, slug="a", name="A", sport=SportEnum.FOOTBALL, api_football_id=1)
    second = add_athlete(session, slug="b", name="B", sport=SportEnum.FOOTBALL, api_football_id=2)
    broken = CanonicalRecords(
        daily_updates=_records().daily_updates,
        season_stats=[SeasonStatRecord("2024/25", None, 1, 1, {})],  # type: ignore[arg-type]
    )
    provider = FakeProvider(
        payloads={1: {"id": 1}, 2: {"id": 2}},
        records={1: broken, 2: _records()},
    )

    first_result, second_result = _orchestrator(session, provider).run().results

    assert first_result.status == SyncStatusEnum.ERROR
    assert "athlete_season_stats" in (first_result.error or "")
    # Sibling writes of the failing athlete still land.
    assert first_result.matches_processed == 1
    assert second_result.status == SyncStatusEnum.SUCCESS
    assert len(SeasonStatRepository(session).list_for_athlete(second.id)) == 1


def test_unexpected_exception_is_recorded_per_athlete(session: Session) -> None:
    add_athlete(session, slug="a", name="A", sport=SportEnum.FOOTBALL, api_football_id=1)
    add_athlete(session, slug="b", name="B", sport=SportEnum.FOOTBALL, api_football_id=2)

    class ExplodingProvider(FakeProvider):
        def normalize(self, raw: Any, *, now: datetime) -> CanonicalRecords:
            if raw["id"] == 1:
                raise KeyError("statistics")
            return super().normalize(raw, now=now)

    provider = ExplodingProvider(payloads={1: {"id": 1}, 2: {"id": 2}}, records={2: _records()})

    results = _orchestrator(session, provider).run().results

    assert [r.status for r in results] == [SyncStatusEnum.ERROR, SyncStatusEnum.SUCCESS]
    assert "statistics" in (results[0].error or "")


def test_delay_separates_athletes_and_other_sports_are_skipped(session: Session) -> None:
    for slug in ("a", "b", "c"):
        add_athlete(session, slug=slug, name=slug.upper(), sport=SportEnum.FOOTBALL)
    add_athlete(session, slug="d", name="D", sport=SportEnum.BASKETBALL)
    sleeps: list[float] = []

    run = _orchestrator(session, FakeProvider(), delay_seconds=0.5, sleep=sleeps.append).run()

    assert [r.athlete for r in run.results] == ["A", "B", "C"]
    assert sleeps == [0.5, 0.5]
    assert run.counts() == {"not_found": 3}


def test_athlete_directory_failure_is_fatal() -> None:
    # No tables: the directory query itself fails.
    engine = create_db_engine(DatabaseConfig(database_url="sqlite+pysqlite:///:memory:"))
    session = create_session_factory(engine)()

    with pytest.raises(OperationalError):
        _orchestrator(session, FakeProvider()).run()


def test_run_sport_sync_closes_adapter(session: Session) -> None:
    provider = FakeProvider()
    registry = AdapterRegistry()
    registry.register(SportEnum.FOOTBALL, factory=lambda: provider)

    run = run_sport_sync(
        session, SportEnum.FOOTBALL, registry=registry, settings=Settings(), sleep=lambda s: None
    )

    assert run.results == []
    assert run.api == "Fake"
    assert provider.closed


def test_run_sport_sync_requires_provider_key(session: Session) -> None:
    add_athlete(session, slug="a", name="A", sport=SportEnum.BASKETBALL)

    with pytest.raises(ConfigurationError):
        run_sport_sync(session, SportEnum.BASKETBALL, settings=Settings(balldontlie_api_key=None))


def _api_football(handler: Any, team_ids: dict[str, int] | None = None) -> ApiFootballAdapter:
    http = BaseHttpClient(
        base_url="https://v3.football.api-sports.io", transport=httpx.MockTransport(handler)
    )
    client = ApiFootballClient(http=http, api_key="k", _sleep=lambda s: None)
    return ApiFootballAdapter(client=client, season=2024, team_ids=team_ids or {})


def _fixture(kickoff: datetime) -> dict[str, Any]:
    return {
        "fixture": {"date": kickoff.isoformat()},
        "league": {"name": "Serie A"},
        "teams": {"home": {"id": 487, "name": "Lazio"}, "away": {"id": 497, "name": "Roma"}},
    }


def test_fixture_outage_keeps_stored_upcoming_matches_and_reports_error(session: Session) -> None:
    athlete = add_athlete(
        session, slug="a", name="A", sport=SportEnum.FOOTBALL, team="Real Madrid", api_football_id=762
    )
    ReconciliationWriter(session).replace_upcoming_matches(
        athlete.id, [UpcomingMatchRecord(NOW + timedelta(days=3), "Sevilla", "La Liga", "away")]
    )
    session.commit()

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/players":
            return httpx.Response(200, json={"errors": [], "response": [{"player": {"id": 762}}]})
        return httpx.Response(503, text="unavailable")

    provider = _api_football(handler, team_ids={"Real Madrid": 541})

    (result,) = _orchestrator(session, provider).run().results

    assert result.status == SyncStatusEnum.ERROR
    assert "upcoming_matches unavailable" in (result.error or "")
    assert result.upcoming_matches == 0
    session.expire_all()
    assert len(UpcomingMatchRepository(session).list_for_athlete(athlete.id)) == 1


def test_transient_team_search_failure_is_retried_for_teammates(session: Session) -> None:
    first = add_athlete(
        session, slug="a", name="A", sport=SportEnum.FOOTBALL, team="Lazio", api_football_id=1
    )
    second = add_athlete(
        session, slug="b", name="B", sport=SportEnum.FOOTBALL, team="Lazio", api_football_id=2
    )
    team_calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/players":
            player_id = int(request.url.params["id"])
            return httpx.Response(200, json={"errors": [], "response": [{"player": {"id": player_id}}]})
        if path == "/teams":
            team_calls.append(request.url.params["search"])
            if len(team_calls) == 1:
                return httpx.Response(503, text="unavailable")
            return httpx.Response(200, json={"errors": [], "response": [{"team": {"id": 487}}]})
        if path == "/fixtures" and "next" in request.url.params:
            fixtures = [_fixture(NOW + timedelta(days=4))]
            return httpx.Response(200, json={"errors": [], "response": fixtures})
        return httpx.Response(200, json={"errors": [], "response": []})

    results = _orchestrator(session, _api_football(handler)).run().results

    assert team_calls == ["Lazio", "Lazio"]
    assert [(r.athlete, r.status) for r in results] == [
        ("A", SyncStatusEnum.ERROR),
        ("B", SyncStatusEnum.SUCCESS),
    ]
    assert results[1].upcoming_matches == 1
    assert UpcomingMatchRepository(session).list_for_athlete(first.id) == []
    assert len(UpcomingMatchRepository(session).list_for_athlete(second.id)) == 1
