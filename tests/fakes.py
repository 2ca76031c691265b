from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tracker_sync.db.enums import ProviderEnum, SportEnum
from tracker_sync.ingestion.providers.base.types import CanonicalRecords


@dataclass
class FakeProvider:
    """In-memory stats provider keyed by athlete name / provider id."""

    search_results: dict[str, int] = field(default_factory=dict)
    payloads: dict[int, Any] = field(default_factory=dict)
    records: dict[int, CanonicalRecords] = field(default_factory=dict)

    provider: ProviderEnum = ProviderEnum.API_FOOTBALL
    sport: SportEnum = SportEnum.FOOTBALL
    label: str = "Fake"

    searches: list[str] = field(default_factory=list)
    fetches: list[int] = field(default_factory=list)
    closed: bool = False

    def search_player(self, name: str) -> int | None:
        self.searches.append(name)
        return self.search_results.get(name)

    def fetch_raw(self, provider_player_id: int, *, team: str | None = None) -> Any | None:
        self.fetches.append(provider_player_id)
        return self.payloads.get(provider_player_id)

    def normalize(self, raw: Any, *, now: datetime) -> CanonicalRecords:
        return self.records.get(raw["id"], CanonicalRecords())

    def close(self) -> None:
        self.closed = True
