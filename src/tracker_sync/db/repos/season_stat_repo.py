from __future__ import annotations

from sqlalchemy.orm import Session

from tracker_sync.db.models.tracker.season_stat import AthleteSeasonStat
from tracker_sync.db.repos.base import BaseRepository


class SeasonStatRepository(BaseRepository[AthleteSeasonStat]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=AthleteSeasonStat)

    def list_for_athlete(self, athlete_id: int) -> list[AthleteSeasonStat]:
        return self.list_where(
            AthleteSeasonStat.athlete_id == athlete_id,
            order_by=AthleteSeasonStat.season.desc(),
        )
