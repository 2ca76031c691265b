from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache
from typing import Callable

from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

from tracker_sync.core.config import Settings, settings
from tracker_sync.db import DatabaseConfig, create_db_engine, create_session_factory
from tracker_sync.ingestion.jobs import default_registry
from tracker_sync.ingestion.providers.balldontlie.adapter import BalldontlieAdapter
from tracker_sync.ingestion.providers.balldontlie.provider import build_balldontlie_adapter
from tracker_sync.ingestion.providers.base.registry import AdapterRegistry

DiscoveryAdapterFactory = Callable[[], BalldontlieAdapter]


def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def _session_factory() -> sessionmaker[Session]:
    engine = create_db_engine(
        DatabaseConfig(database_url=settings.database_url, echo=settings.db_echo)
    )
    return create_session_factory(engine)


def get_session() -> Iterator[Session]:
    session = _session_factory()()
    try:
        yield session
    finally:
        session.close()


def get_registry(app_settings: Settings = Depends(get_settings)) -> AdapterRegistry:
    # Factories only; adapters (and their keys) are checked when a run starts.
    return default_registry(app_settings)


def get_discovery_adapter_factory(
    app_settings: Settings = Depends(get_settings),
) -> DiscoveryAdapterFactory:
    return lambda: build_balldontlie_adapter(app_settings)
