from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Callable

from tracker_sync.core.text import normalize_name

logger = logging.getLogger(__name__)

TeamSearch = Callable[[str], int | None]


@dataclass
class TeamIdLookup:
    """Team name -> provider team id.

    Static table first, then the provider's remote search. Every answer (misses
    included) is cached for the lifetime of the lookup, which is one sync run.
    A search that raises is not an answer: the error propagates and the next
    call searches again.
    """

    table: Mapping[str, int]
    search: TeamSearch
    _cache: dict[str, int | None] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self._table = {normalize_name(name): team_id for name, team_id in self.table.items()}

    def resolve(self, team_name: str | None) -> int | None:
        if not team_name or not team_name.strip():
            return None

        key = normalize_name(team_name)
        if key in self._table:
            return self._table[key]
        if key in self._cache:
            return self._cache[key]

        logger.info("team id not in table, searching", extra={"team": team_name})
        team_id = self.search(team_name)
        if team_id is None:
            logger.warning("could not find team id", extra={"team": team_name})
        self._cache[key] = team_id
        return team_id
