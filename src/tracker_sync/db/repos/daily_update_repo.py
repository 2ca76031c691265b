from __future__ import annotations

from sqlalchemy.orm import Session

from tracker_sync.db.models.tracker.daily_update import AthleteDailyUpdate
from tracker_sync.db.repos.base import BaseRepository


class DailyUpdateRepository(BaseRepository[AthleteDailyUpdate]):
    def __init__(self, session: Session) -> None:
        super().__init__(session=session, model=AthleteDailyUpdate)

    def list_for_athlete(self, athlete_id: int) -> list[AthleteDailyUpdate]:
        return self.list_where(
            AthleteDailyUpdate.athlete_id == athlete_id,
            order_by=AthleteDailyUpdate.date.desc(),
        )
