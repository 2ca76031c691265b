from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

from tracker_sync.ingestion.providers.base.client import BaseHttpClient
from tracker_sync.ingestion.providers.base.errors import (
    ProviderMappingError,
    ProviderRateLimited,
    ProviderResponseError,
)

logger = logging.getLogger(__name__)


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass
class ApiSportsRateLimiter:
    """Proactive throttling based on API-Sports rate limit headers.

    The provider returns per-minute limit/remaining headers; we use them to pace
    requests and avoid hitting HTTP 429 during a sync run.
    """

    minute_limit_low_watermark: int = 2
    min_interval_s: float = 0.0
    last_request_monotonic: float | None = None

    _sleep: Any = field(default=time.sleep, repr=False)
    _monotonic: Any = field(default=time.monotonic, repr=False)

    def before_request(self) -> None:
        if self.min_interval_s <= 0.0:
            return
        now = float(self._monotonic())
        if self.last_request_monotonic is None:
            return
        elapsed = now - self.last_request_monotonic
        remaining = self.min_interval_s - elapsed
        if remaining > 0:
            self._sleep(remaining)

    def after_response(self, headers: Mapping[str, str]) -> None:
        limit = _parse_int(headers.get("X-RateLimit-Limit"))
        remaining = _parse_int(headers.get("X-RateLimit-Remaining"))

        if limit and limit > 0:
            self.min_interval_s = max(self.min_interval_s, 60.0 / float(limit))

        # Close to exhausting the minute bucket (or another process shares the key).
        if remaining is not None and remaining <= self.minute_limit_low_watermark:
            # No reset header; a full minute is the only safe cooldown at zero.
            cooldown = 60.0 if remaining <= 1 else 10.0
            logger.warning(
                "api-sports minute bucket nearly exhausted, cooling down",
                extra={"remaining": remaining, "cooldown_s": cooldown},
            )
            self._sleep(cooldown)

        self.last_request_monotonic = float(self._monotonic())


@dataclass
class ApiFootballClient:
    http: BaseHttpClient
    api_key: str
    rate_limiter: ApiSportsRateLimiter = field(default_factory=ApiSportsRateLimiter)
    max_attempts: int = 5

    _sleep: Any = field(default=time.sleep, repr=False)

    def _headers(self) -> dict[str, str]:
        host = urlparse(self.http.base_url).netloc or "v3.football.api-sports.io"
        return {"x-rapidapi-key": self.api_key, "x-rapidapi-host": host}

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        self.rate_limiter.before_request()

        # Basic retry on minute-bucket throttling.
        attempts = 0
        while True:
            attempts += 1
            try:
                data, headers = self.http.get_json_with_headers(
                    path, params=params, headers=self._headers()
                )
                self.rate_limiter.after_response(headers)
                break
            except ProviderRateLimited as e:
                if attempts >= self.max_attempts:
                    raise
                backoff = e.retry_after if e.retry_after is not None else 60.0
                logger.warning(
                    "api-football rate limited, backing off",
                    extra={"path": path, "attempt": attempts, "backoff_s": backoff},
                )
                self._sleep(backoff)

        # `errors` is [] on success, and a list or a {field: message} object on failure.
        errors = data.get("errors") or []
        if errors:
            raise ProviderResponseError(f"api-football returned errors: {errors}")

        return data

    def get_response_items(
        self, path: str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        payload = self.get(path, params=params)
        items = payload.get("response")
        if not isinstance(items, list):
            raise ProviderMappingError(
                "Expected 'response' list", context={"path": path, "type": str(type(items))}
            )
        return [i for i in items if isinstance(i, dict)]

    def close(self) -> None:
        self.http.close()
