from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_FOOTBALL_TEAM_IDS: dict[str, int] = {
    "Real Madrid": 541,
    "Juventus": 496,
    "Brighton": 51,
    "Eintracht Frankfurt": 169,
    "Lille": 79,
}


class ConfigurationError(RuntimeError):
    """A required setting (usually a provider secret) is missing."""


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # DB
    database_url: str = Field(
        default="sqlite+pysqlite:///./tracker_sync.db",
        validation_alias="DATABASE_URL",
    )
    db_echo: bool = False

    # api-football
    api_football_key: str | None = Field(default=None, repr=False)
    api_football_base_url: str = "https://v3.football.api-sports.io"
    api_football_season: int = 2024
    api_football_team_ids: dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_API_FOOTBALL_TEAM_IDS)
    )

    # balldontlie
    balldontlie_api_key: str | None = Field(default=None, repr=False)
    balldontlie_base_url: str = "https://api.balldontlie.io/v1"
    balldontlie_season: int = 2024

    # sync
    sync_delay_seconds: float = 0.5
    http_timeout_s: float = 30.0
    http_connect_timeout_s: float = 10.0
    store_ingested_payloads: bool = True

    # runtime
    environment: str = "development"
    log_level: str | None = None
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    # -----------------------------
    # Required-key helpers
    # -----------------------------

    def require_api_football_key(self) -> str:
        if not self.api_football_key:
            raise ConfigurationError(
                "API_FOOTBALL_KEY is not set. Set it in the environment or .env file."
            )
        return self.api_football_key

    def require_balldontlie_key(self) -> str:
        if not self.balldontlie_api_key:
            raise ConfigurationError(
                "BALLDONTLIE_API_KEY is not set. Set it in the environment or .env file."
            )
        return self.balldontlie_api_key


settings = Settings()
