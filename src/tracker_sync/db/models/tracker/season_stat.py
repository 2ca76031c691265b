from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker_sync.db.base import Base, TimestampMixin


class AthleteSeasonStat(Base, TimestampMixin):
    __tablename__ = "athlete_season_stats"

    id: Mapped[int] = mapped_column(primary_key=True)

    athlete_id: Mapped[int] = mapped_column(
        ForeignKey("athlete_profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    season: Mapped[str] = mapped_column(String(16), nullable=False)
    competition: Mapped[str] = mapped_column(String(120), nullable=False)

    games_played: Mapped[int | None] = mapped_column(Integer, nullable=True)
    games_started: Mapped[int | None] = mapped_column(Integer, nullable=True)

    stats: Mapped[dict[str, Any]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"),
        nullable=False,
        default=dict,
    )

    athlete: Mapped[AthleteProfile] = relationship(back_populates="season_stats")

    __table_args__ = (
        UniqueConstraint(
            "athlete_id",
            "season",
            "competition",
            name="uq_athlete_season_stats_athlete_season_competition",
        ),
    )


from tracker_sync.db.models.tracker.athlete_profile import AthleteProfile  # noqa: E402
