from __future__ import annotations

from sqlalchemy.orm import Session

from tracker_sync.db.models.tracker.upcoming_match import AthleteUpcomingMatch
from tracker_sync.db.repos.base import BaseRepository


class UpcomingMatchRepository(BaseRepository[AthleteUpcomingMatch]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=AthleteUpcomingMatch)

    def list_for_athlete(self, athlete_id: int) -> list[AthleteUpcomingMatch]:
        return self.list_where(
            AthleteUpcomingMatch.athlete_id == athlete_id,
            order_by=AthleteUpcomingMatch.match_date,
        )

    def delete_for_athlete(self, athlete_id: int, *, flush: bool = True) -> int:
        return self.delete_where(AthleteUpcomingMatch.athlete_id == athlete_id, flush=flush)
