from __future__ import annotations

from tracker_sync.core.config import Settings
from tracker_sync.db.enums import SportEnum
from tracker_sync.ingestion.providers.balldontlie.adapter import BalldontlieAdapter
from tracker_sync.ingestion.providers.balldontlie.client import BalldontlieClient
from tracker_sync.ingestion.providers.base.client import BaseHttpClient
from tracker_sync.ingestion.providers.base.registry import AdapterRegistry


def build_balldontlie_adapter(settings: Settings) -> BalldontlieAdapter:
    # Raises ConfigurationError before any HTTP client exists.
    api_key = settings.require_balldontlie_key()
    http = BaseHttpClient(
        base_url=settings.balldontlie_base_url,
        timeout_s=settings.http_timeout_s,
        connect_timeout_s=settings.http_connect_timeout_s,
    )
    return BalldontlieAdapter(
        client=BalldontlieClient(http=http, api_key=api_key),
        season=settings.balldontlie_season,
    )


def register_balldontlie_adapter(registry: AdapterRegistry, *, settings: Settings) -> None:
    registry.register(SportEnum.BASKETBALL, factory=lambda: build_balldontlie_adapter(settings))
