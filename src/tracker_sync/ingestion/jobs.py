from __future__ import annotations

import time
from typing import Callable

from sqlalchemy.orm import Session

from tracker_sync.core.config import Settings
from tracker_sync.core.config import settings as default_settings
from tracker_sync.db.enums import SportEnum
from tracker_sync.ingestion.orchestrator import SyncOrchestrator, SyncRunResult
from tracker_sync.ingestion.providers.api_football.provider import register_api_football_adapter
from tracker_sync.ingestion.providers.balldontlie.provider import register_balldontlie_adapter
from tracker_sync.ingestion.providers.base.registry import AdapterRegistry


def default_registry(settings: Settings) -> AdapterRegistry:
    registry = AdapterRegistry()
    register_api_football_adapter(registry, settings=settings)
    register_balldontlie_adapter(registry, settings=settings)
    return registry


def run_sport_sync(
    session: Session,
    sport: SportEnum,
    *,
    registry: AdapterRegistry | None = None,
    settings: Settings = default_settings,
    delay_seconds: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> SyncRunResult:
    """
    One sync run for `sport`. Adapter construction happens first, so a missing
    provider key raises ConfigurationError before any athlete is touched.
    """
    registry = registry or default_registry(settings)
    provider = registry.get(sport)
    try:
        orchestrator = SyncOrchestrator(
            session,
            provider,
            delay_seconds=settings.sync_delay_seconds if delay_seconds is None else delay_seconds,
            store_payloads=settings.store_ingested_payloads,
            sleep=sleep,
        )
        return orchestrator.run()
    finally:
        provider.close()
