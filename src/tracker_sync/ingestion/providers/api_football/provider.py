from __future__ import annotations

from tracker_sync.core.config import Settings
from tracker_sync.db.enums import SportEnum
from tracker_sync.ingestion.providers.api_football.adapter import ApiFootballAdapter
from tracker_sync.ingestion.providers.api_football.client import ApiFootballClient
from tracker_sync.ingestion.providers.base.client import BaseHttpClient
from tracker_sync.ingestion.providers.base.registry import AdapterRegistry


def build_api_football_adapter(settings: Settings) -> ApiFootballAdapter:
    # Raises ConfigurationError before any HTTP client exists.
    api_key = settings.require_api_football_key()
    http = BaseHttpClient(
        base_url=settings.api_football_base_url,
        timeout_s=settings.http_timeout_s,
        connect_timeout_s=settings.http_connect_timeout_s,
    )
    return ApiFootballAdapter(
        client=ApiFootballClient(http=http, api_key=api_key),
        season=settings.api_football_season,
        team_ids=dict(settings.api_football_team_ids),
    )


def register_api_football_adapter(registry: AdapterRegistry, *, settings: Settings) -> None:
    registry.register(SportEnum.FOOTBALL, factory=lambda: build_api_football_adapter(settings))
