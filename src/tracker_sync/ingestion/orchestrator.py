from __future__ import annotations

import dataclasses
import logging
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Callable

from sqlalchemy.orm import Session

from tracker_sync.db.enums import SportEnum, SyncStatusEnum
from tracker_sync.db.errors import WriteError
from tracker_sync.db.models.tracker.athlete_profile import AthleteProfile
from tracker_sync.db.repos.athlete_repo import AthleteRepository
from tracker_sync.ingestion.providers.base.adapter import StatsProvider
from tracker_sync.ingestion.resolver import AthleteResolver
from tracker_sync.ingestion.writer import ReconciliationWriter

logger = logging.getLogger(__name__)


@dataclass
class AthleteSyncResult:
    athlete: str
    status: SyncStatusEnum = SyncStatusEnum.PENDING
    matches_processed: int = 0
    upcoming_matches: int = 0
    season_stats: int = 0
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "athlete": self.athlete,
            "status": self.status.value,
            "matches_processed": self.matches_processed,
            "upcoming_matches": self.upcoming_matches,
            "season_stats": self.season_stats,
        }
        if self.error is not None:
            out["error"] = self.error
        return out


@dataclass
class SyncRunResult:
    sport: SportEnum
    api: str
    started_at: datetime
    finished_at: datetime | None = None
    results: list[AthleteSyncResult] = field(default_factory=list)

    def counts(self) -> dict[str, int]:
        out: dict[str, int] = {}
        for r in self.results:
            out[r.status.value] = out.get(r.status.value, 0) + 1
        return out

    def to_dict(self) -> dict[str, Any]:
        return {
            "sport": self.sport.value,
            "api": self.api,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "results": [r.to_dict() for r in self.results],
        }


def _payload_json(raw: Any) -> dict[str, Any]:
    if dataclasses.is_dataclass(raw) and not isinstance(raw, type):
        return dataclasses.asdict(raw)
    if isinstance(raw, dict):
        return raw
    return {"raw": raw}


class SyncOrchestrator:
    """
    Runs one sport's sync: every athlete of that sport, strictly in sequence.

    Per athlete: resolve provider id -> fetch -> normalize -> write. Only setup
    failures (the athlete directory query) escape `run()`; anything that goes
    wrong for one athlete is recorded on its result and the loop moves on.
    """

    def __init__(
        self,
        session: Session,
        provider: StatsProvider,
        *,
        delay_seconds: float = 0.5,
        store_payloads: bool = True,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = lambda: datetime.now(tz=UTC),
    ) -> None:
        self.session = session
        self.provider = provider
        self.delay_seconds = delay_seconds
        self.store_payloads = store_payloads
        self._sleep = sleep
        self._clock = clock

        self.athletes = AthleteRepository(session)
        self.resolver = AthleteResolver(provider=provider, athletes=self.athletes)
        self.writer = ReconciliationWriter(session)

    def run(self) -> SyncRunResult:
        run = SyncRunResult(
            sport=self.provider.sport, api=self.provider.label, started_at=self._clock()
        )

        athletes = self.athletes.list_by_sport(self.provider.sport)
        logger.info(
            "sync run started",
            extra={"sport": self.provider.sport.value, "athletes": len(athletes)},
        )

        for i, athlete in enumerate(athletes):
            if i > 0 and self.delay_seconds > 0:
                self._sleep(self.delay_seconds)
            run.results.append(self.sync_athlete(athlete))

        run.finished_at = self._clock()
        logger.info(
            "sync run finished",
            extra={"sport": self.provider.sport.value, "counts": run.counts()},
        )
        return run

    def sync_athlete(self, athlete: AthleteProfile) -> AthleteSyncResult:
        # Read before any rollback can expire the instance.
        name = athlete.name
        result = AthleteSyncResult(athlete=name)

        try:
            result.status = SyncStatusEnum.RESOLVING
            provider_player_id = self.resolver.resolve(athlete)
            if provider_player_id is None:
                result.status = SyncStatusEnum.NOT_FOUND
                logger.warning("athlete not found at provider", extra={"athlete": name})
                return result
            # A discovered id survives whatever happens next.
            self.session.commit()

            result.status = SyncStatusEnum.FETCHING
            raw = self.provider.fetch_raw(provider_player_id, team=athlete.team)
            if raw is None:
                result.status = SyncStatusEnum.NO_DATA
                logger.warning(
                    "no data for athlete",
                    extra={"athlete": name, "provider_player_id": provider_player_id},
                )
                return result

            now = self._clock()
            if self.store_payloads:
                try:
                    self.writer.record_payload(
                        provider=self.provider.provider.value,
                        entity_key=str(provider_player_id),
                        payload=_payload_json(raw),
                        fetched_at=now,
                        athlete_id=athlete.id,
                    )
                except WriteError as e:
                    logger.warning("raw payload not stored", extra={"athlete": name, "error": str(e)})

            result.status = SyncStatusEnum.NORMALIZING
            records = self.provider.normalize(raw, now=now)

            result.status = SyncStatusEnum.WRITING
            summary = self.writer.write_all(athlete.id, records)
            self.session.commit()

            result.matches_processed = summary.daily_updates_written
            result.season_stats = summary.season_stats_written
            result.upcoming_matches = summary.upcoming_matches_written
            problems = [
                f"{section} unavailable from provider" for section in sorted(records.unavailable)
            ]
            problems.extend(summary.failures)
            if problems:
                result.status = SyncStatusEnum.ERROR
                result.error = "; ".join(problems)
            else:
                result.status = SyncStatusEnum.SUCCESS
        except Exception as e:
            logger.exception("athlete sync failed", extra={"athlete": name})
            result.status = SyncStatusEnum.ERROR
            result.error = str(e)
            # Drop whatever the failed athlete left pending; earlier commits stand.
            self.session.rollback()
            return result

        logger.info(
            "athlete synced",
            extra={
                "athlete": name,
                "status": result.status.value,
                "matches_processed": result.matches_processed,
                "season_stats": result.season_stats,
                "upcoming_matches": result.upcoming_matches,
            },
        )
        return result
