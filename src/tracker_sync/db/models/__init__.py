from tracker_sync.db.models.ingestion.ingested_payload import IngestedPayload
from tracker_sync.db.models.tracker.athlete_profile import AthleteProfile
from tracker_sync.db.models.tracker.daily_update import AthleteDailyUpdate
from tracker_sync.db.models.tracker.live_match import AthleteLiveMatch
from tracker_sync.db.models.tracker.season_stat import AthleteSeasonStat
from tracker_sync.db.models.tracker.upcoming_match import AthleteUpcomingMatch

__all__ = [
    "AthleteDailyUpdate",
    "AthleteLiveMatch",
    "AthleteProfile",
    "AthleteSeasonStat",
    "AthleteUpcomingMatch",
    "IngestedPayload",
]
