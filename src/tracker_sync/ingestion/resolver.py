from __future__ import annotations

import logging
from dataclasses import dataclass

from tracker_sync.db.models.tracker.athlete_profile import AthleteProfile
from tracker_sync.db.repos.athlete_repo import AthleteRepository
from tracker_sync.ingestion.providers.base.adapter import StatsProvider

logger = logging.getLogger(__name__)


@dataclass
class AthleteResolver:
    """Provider player id for an athlete, discovering and persisting it on first use."""

    provider: StatsProvider
    athletes: AthleteRepository

    def resolve(self, athlete: AthleteProfile) -> int | None:
        existing = self.athletes.provider_id(athlete, self.provider.provider)
        if existing is not None:
            return existing

        logger.info(
            "no provider id, searching by name",
            extra={"athlete": athlete.name, "provider": self.provider.provider.value},
        )
        found = self.provider.search_player(athlete.name)
        if found is None:
            return None

        # Persist before returning so later runs skip the search.
        self.athletes.set_provider_id(athlete, self.provider.provider, found)
        logger.info(
            "discovered provider id",
            extra={
                "athlete": athlete.name,
                "provider": self.provider.provider.value,
                "provider_player_id": found,
            },
        )
        return found
