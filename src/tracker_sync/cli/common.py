from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from tracker_sync.core.config import settings
from tracker_sync.db import DatabaseConfig, create_db_engine, create_session_factory


@contextmanager
def session_scope(database_url: str | None = None) -> Iterator[Session]:
    """
    One engine and session per CLI command.

    Commits on success, rolls back on exception, and disposes the engine on exit
    so a finished sync leaves no pooled connections behind.
    """
    engine = create_db_engine(
        DatabaseConfig(database_url=database_url or settings.database_url, echo=settings.db_echo)
    )
    session = create_session_factory(engine)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        engine.dispose()
