from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

from tracker_sync.db.enums import ProviderEnum, SportEnum

from .types import CanonicalRecords


class StatsProvider(Protocol):
    """
    Orchestration depends on this, not on any HTTP client.

    Every provider, whatever its payload shape, produces the same three candidate
    record shapes (daily updates, season stats, upcoming matches).
    """

    provider: ProviderEnum
    sport: SportEnum
    label: str

    def search_player(self, name: str) -> int | None:
        """First search result's provider player id, or None. Never raises for provider errors."""
        ...

    def fetch_raw(self, provider_player_id: int, *, team: str | None = None) -> Any | None:
        """
        Fetch everything needed for one athlete. None means "no data, continue":
        network errors, non-2xx and provider error objects are logged, not raised.
        """
        ...

    def normalize(self, raw: Any, *, now: datetime) -> CanonicalRecords:
        """Pure mapping of a raw payload into canonical candidates."""
        ...

    def close(self) -> None: ...
