from __future__ import annotations

import datetime as dt
from typing import Any

from sqlalchemy import JSON, Boolean, Date, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker_sync.db.base import Base, TimestampMixin


class AthleteDailyUpdate(Base, TimestampMixin):
    __tablename__ = "athlete_daily_updates"

    id: Mapped[int] = mapped_column(primary_key=True)

    athlete_id: Mapped[int] = mapped_column(
        ForeignKey("athlete_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    opponent: Mapped[str | None] = mapped_column(String(120), nullable=True)
    competition: Mapped[str | None] = mapped_column(String(120), nullable=True)
    home_away: Mapped[str | None] = mapped_column(String(8), nullable=True)
    match_result: Mapped[str | None] = mapped_column(String(16), nullable=True)

    played: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default="false"
    )
    minutes_played: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)

    stats: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        default=dict,
    )

    # Admin-managed; the sync never writes these.
    injury_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    injury_details: Mapped[str | None] = mapped_column(String, nullable=True)

    athlete: Mapped[AthleteProfile] = relationship(back_populates="daily_updates")

    __table_args__ = (
        UniqueConstraint("athlete_id", "date", name="uq_athlete_daily_updates_athlete_date"),
    )


from tracker_sync.db.models.tracker.athlete_profile import AthleteProfile  # noqa: E402
