from __future__ import annotations

from sqlalchemy.orm import Session

from tracker_sync.db.enums import ProviderEnum, SportEnum
from tracker_sync.db.models.tracker.athlete_profile import AthleteProfile
from tracker_sync.db.repos.base import BaseRepository

# Column on `athlete_profiles` holding each provider's player id.
PROVIDER_ID_COLUMNS: dict[ProviderEnum, str] = {
    ProviderEnum.API_FOOTBALL: "api_football_id",
    ProviderEnum.BALLDONTLIE: "balldontlie_id",
}


class AthleteRepository(BaseRepository[AthleteProfile]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=AthleteProfile)

    def list_by_sport(self, sport: SportEnum) -> list[AthleteProfile]:
        return self.list_where(AthleteProfile.sport == sport, order_by=AthleteProfile.name)

    def get_by_slug(self, slug: str) -> AthleteProfile | None:
        return self.first_where(AthleteProfile.slug == slug)

    @staticmethod
    def provider_id(athlete: AthleteProfile, provider: ProviderEnum) -> int | None:
        value = getattr(athlete, PROVIDER_ID_COLUMNS[provider])
        return int(value) if value else None

    def set_provider_id(
        self,
        athlete: AthleteProfile,
        provider: ProviderEnum,
        provider_id: int,
        *,
        flush: bool = True,
    ) -> AthleteProfile:
        if provider_id <= 0:
            raise ValueError(f"Provider ids are positive integers, got {provider_id}")
        return self.patch(athlete, {PROVIDER_ID_COLUMNS[provider]: provider_id}, flush=flush)
