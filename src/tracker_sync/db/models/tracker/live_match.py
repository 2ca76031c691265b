from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker_sync.db.base import Base, TimestampMixin
from tracker_sync.db.enums import LiveMatchStatusEnum


class AthleteLiveMatch(Base, TimestampMixin):
    """Admin-maintained live state. Read by the site, never written by a sync run."""

    __tablename__ = "athlete_live_matches"

    id: Mapped[int] = mapped_column(primary_key=True)

    athlete_id: Mapped[int] = mapped_column(
        ForeignKey("athlete_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    opponent: Mapped[str] = mapped_column(String(120), nullable=False)
    competition: Mapped[str] = mapped_column(String(120), nullable=False)
    kickoff_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    match_status: Mapped[LiveMatchStatusEnum] = mapped_column(
        Enum(
            LiveMatchStatusEnum,
            name="live_match_status_enum",
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=LiveMatchStatusEnum.SCHEDULED,
    )
    home_away: Mapped[str | None] = mapped_column(String(8), nullable=True)

    current_minute: Mapped[int | None] = mapped_column(Integer, nullable=True)
    home_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    away_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    last_event: Mapped[str | None] = mapped_column(String, nullable=True)

    athlete_stats: Mapped[dict[str, Any] | None] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=True,
    )

    athlete: Mapped[AthleteProfile] = relationship(back_populates="live_matches")


from tracker_sync.db.models.tracker.athlete_profile import AthleteProfile  # noqa: E402
