from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tracker_sync.db.errors import WriteError
from tracker_sync.db.models.ingestion.ingested_payload import IngestedPayload
from tracker_sync.db.models.tracker.daily_update import AthleteDailyUpdate
from tracker_sync.db.models.tracker.season_stat import AthleteSeasonStat
from tracker_sync.db.models.tracker.upcoming_match import AthleteUpcomingMatch
from tracker_sync.db.repos.daily_update_repo import DailyUpdateRepository
from tracker_sync.db.repos.season_stat_repo import SeasonStatRepository
from tracker_sync.db.repos.upcoming_match_repo import UpcomingMatchRepository
from tracker_sync.ingestion.providers.base.types import (
    UPCOMING_MATCHES,
    CanonicalRecords,
    DailyUpdateRecord,
    SeasonStatRecord,
    UpcomingMatchRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class WriteSummary:
    daily_updates_written: int = 0
    season_stats_written: int = 0
    upcoming_matches_written: int = 0
    failures: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class ReconciliationWriter:
    """
    Applies canonical records to the store.

    Historical rows (daily updates, season stats) are upserted on their natural
    key with full-row overwrite; upcoming matches are replaced wholesale. Every
    write runs in its own SAVEPOINT so one rejected record never poisons the
    surrounding transaction.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.daily_updates = DailyUpdateRepository(session)
        self.season_stats = SeasonStatRepository(session)
        self.upcoming_matches = UpcomingMatchRepository(session)

    def _guarded(self, table: str, key: str, fn: Callable[[], T]) -> T:
        try:
            with self.session.begin_nested():
                return fn()
        except SQLAlchemyError as e:
            raise WriteError(table, key, e) from e

    def upsert_daily_update(self, athlete_id: int, record: DailyUpdateRecord) -> AthleteDailyUpdate:
        def write() -> AthleteDailyUpdate:
            row, _ = self.daily_updates.upsert(
                {"athlete_id": athlete_id, "date": record.date},
                {
                    "opponent": record.opponent,
                    "competition": record.competition,
                    "home_away": record.home_away,
                    "match_result": record.match_result,
                    "played": record.played,
                    "minutes_played": record.minutes_played,
                    "rating": record.rating,
                    "stats": dict(record.stats),
                },
            )
            return row

        return self._guarded(
            AthleteDailyUpdate.__tablename__, f"athlete_id={athlete_id} date={record.date}", write
        )

    def upsert_season_stat(self, athlete_id: int, record: SeasonStatRecord) -> AthleteSeasonStat:
        def write() -> AthleteSeasonStat:
            row, _ = self.season_stats.upsert(
                {
                    "athlete_id": athlete_id,
                    "season": record.season,
                    "competition": record.competition,
                },
                {
                    "games_played": record.games_played,
                    "games_started": record.games_started,
                    "stats": dict(record.stats),
                },
            )
            return row

        return self._guarded(
            AthleteSeasonStat.__tablename__,
            f"athlete_id={athlete_id} season={record.season} competition={record.competition}",
            write,
        )

    def replace_upcoming_matches(self, athlete_id: int, records: list[UpcomingMatchRecord]) -> int:
        """Delete-then-insert as one unit. An empty list leaves the athlete with no fixtures."""

        def write() -> int:
            self.upcoming_matches.delete_for_athlete(athlete_id)
            for record in records:
                self.upcoming_matches.add(
                    AthleteUpcomingMatch(
                        athlete_id=athlete_id,
                        match_date=record.match_date,
                        opponent=record.opponent,
                        competition=record.competition,
                        home_away=record.home_away,
                    ),
                    flush=False,
                )
            self.session.flush()
            return len(records)

        return self._guarded(
            AthleteUpcomingMatch.__tablename__, f"athlete_id={athlete_id}", write
        )

    def record_payload(
        self,
        *,
        provider: str,
        entity_key: str,
        payload: dict[str, Any],
        fetched_at: datetime,
        athlete_id: int | None = None,
    ) -> None:
        def write() -> None:
            self.session.add(
                IngestedPayload(
                    provider=provider,
                    entity_type="athlete_sync",
                    entity_key=entity_key,
                    athlete_id=athlete_id,
                    fetched_at=fetched_at,
                    payload_json=payload,
                )
            )
            self.session.flush()

        self._guarded(IngestedPayload.__tablename__, f"{provider}:{entity_key}", write)

    def write_all(self, athlete_id: int, records: CanonicalRecords) -> WriteSummary:
        summary = WriteSummary()

        for daily in records.daily_updates:
            try:
                self.upsert_daily_update(athlete_id, daily)
                summary.daily_updates_written += 1
            except WriteError as e:
                logger.error("daily update write failed", extra={"error": str(e)})
                summary.failures.append(str(e))

        for season in records.season_stats:
            try:
                self.upsert_season_stat(athlete_id, season)
                summary.season_stats_written += 1
            except WriteError as e:
                logger.error("season stat write failed", extra={"error": str(e)})
                summary.failures.append(str(e))

        if UPCOMING_MATCHES in records.unavailable:
            logger.warning(
                "upcoming matches unavailable, keeping stored rows", extra={"athlete_id": athlete_id}
            )
            return summary

        try:
            summary.upcoming_matches_written = self.replace_upcoming_matches(
                athlete_id, records.upcoming_matches
            )
        except WriteError as e:
            logger.error("upcoming matches replace failed", extra={"error": str(e)})
            summary.failures.append(str(e))

        return summary
