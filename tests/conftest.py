from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy.orm import Session

import tracker_sync.db.models  # noqa: F401
from tracker_sync.db import Base, DatabaseConfig, create_db_engine, create_session_factory
from tracker_sync.db.enums import SportEnum
from tracker_sync.db.models.tracker.athlete_profile import AthleteProfile


@pytest.fixture
def session() -> Iterator[Session]:
    engine = create_db_engine(DatabaseConfig(database_url="sqlite+pysqlite:///:memory:"))
    Base.metadata.create_all(engine)
    s = create_session_factory(engine)()
    try:
        yield s
    finally:
        s.close()
        engine.dispose()


def add_athlete(
    session: Session,
    *,
    slug: str,
    name: str,
    sport: SportEnum,
    team: str | None = None,
    api_football_id: int | None = None,
    balldontlie_id: int | None = None,
) -> AthleteProfile:
    athlete = AthleteProfile(
        slug=slug,
        name=name,
        sport=sport,
        team=team,
        api_football_id=api_football_id,
        balldontlie_id=balldontlie_id,
    )
    session.add(athlete)
    session.commit()
    return athlete
