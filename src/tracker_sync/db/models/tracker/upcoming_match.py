from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker_sync.db.base import Base, TimestampMixin


class AthleteUpcomingMatch(Base, TimestampMixin):
    """Forward fixture list; rows are replaced wholesale on every sync."""

    __tablename__ = "athlete_upcoming_matches"

    id: Mapped[int] = mapped_column(primary_key=True)

    athlete_id: Mapped[int] = mapped_column(
        ForeignKey("athlete_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    match_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    opponent: Mapped[str] = mapped_column(String(120), nullable=False)
    competition: Mapped[str] = mapped_column(String(120), nullable=False)
    home_away: Mapped[str | None] = mapped_column(String(8), nullable=True)

    athlete: Mapped[AthleteProfile] = relationship(back_populates="upcoming_matches")

    __table_args__ = (
        Index("ix_athlete_upcoming_matches_athlete_date", "athlete_id", "match_date"),
    )


from tracker_sync.db.models.tracker.athlete_profile import AthleteProfile  # noqa: E402
