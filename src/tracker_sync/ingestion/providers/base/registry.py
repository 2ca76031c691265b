from __future__ import annotations

from typing import Callable

from tracker_sync.db.enums import SportEnum

from .adapter import StatsProvider
from .errors import ProviderCapabilityError

AdapterFactory = Callable[[], StatsProvider]


class AdapterRegistry:
    """One stats provider per sport; factories build a fresh adapter for each run."""

    def __init__(self) -> None:
        self._factories: dict[SportEnum, AdapterFactory] = {}

    def register(self, sport: SportEnum, factory: AdapterFactory) -> None:
        if sport in self._factories:
            raise ValueError(f"Duplicate adapter registration: {sport}")
        self._factories[sport] = factory

    def get(self, sport: SportEnum) -> StatsProvider:
        factory = self._factories.get(sport)
        if factory is None:
            raise ProviderCapabilityError(f"No adapter registered for sport={sport}")

        return factory()
