from __future__ import annotations

from sqlalchemy import Enum, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tracker_sync.db.base import Base, TimestampMixin
from tracker_sync.db.enums import SportEnum


class AthleteProfile(Base, TimestampMixin):
    __tablename__ = "athlete_profiles"

    id: Mapped[int] = mapped_column(primary_key=True)

    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    sport: Mapped[SportEnum] = mapped_column(
        Enum(SportEnum, name="sport_enum", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    team: Mapped[str | None] = mapped_column(String(120), nullable=True)
    league: Mapped[str | None] = mapped_column(String(120), nullable=True)
    position: Mapped[str | None] = mapped_column(String(64), nullable=True)
    jersey_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(String, nullable=True)

    # External provider ids; at most one per provider.
    api_football_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    balldontlie_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    daily_updates: Mapped[list[AthleteDailyUpdate]] = relationship(
        back_populates="athlete", cascade="all, delete-orphan", passive_deletes=True
    )
    season_stats: Mapped[list[AthleteSeasonStat]] = relationship(
        back_populates="athlete", cascade="all, delete-orphan", passive_deletes=True
    )
    upcoming_matches: Mapped[list[AthleteUpcomingMatch]] = relationship(
        back_populates="athlete", cascade="all, delete-orphan", passive_deletes=True
    )
    live_matches: Mapped[list[AthleteLiveMatch]] = relationship(
        back_populates="athlete", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (Index("ix_athlete_profiles_sport_name", "sport", "name"),)


from tracker_sync.db.models.tracker.daily_update import AthleteDailyUpdate  # noqa: E402
from tracker_sync.db.models.tracker.live_match import AthleteLiveMatch  # noqa: E402
from tracker_sync.db.models.tracker.season_stat import AthleteSeasonStat  # noqa: E402
from tracker_sync.db.models.tracker.upcoming_match import AthleteUpcomingMatch  # noqa: E402
