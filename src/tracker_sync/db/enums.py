from __future__ import annotations

from enum import StrEnum


class ProviderEnum(StrEnum):
    API_FOOTBALL = "api_football"
    BALLDONTLIE = "balldontlie"


class SportEnum(StrEnum):
    FOOTBALL = "football"
    BASKETBALL = "basketball"


class HomeAwayEnum(StrEnum):
    HOME = "home"
    AWAY = "away"


class SyncStatusEnum(StrEnum):
    PENDING = "pending"
    RESOLVING = "resolving"
    FETCHING = "fetching"
    NORMALIZING = "normalizing"
    WRITING = "writing"

    # Terminal
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    NO_DATA = "no_data"
    ERROR = "error"


class LiveMatchStatusEnum(StrEnum):
    SCHEDULED = "scheduled"
    LIVE = "live"
    HALFTIME = "halftime"
    FINISHED = "finished"
