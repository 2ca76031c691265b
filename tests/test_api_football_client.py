from __future__ import annotations

from typing import Any

import httpx
import pytest

from tracker_sync.ingestion.providers.api_football.client import (
    ApiFootballClient,
    ApiSportsRateLimiter,
)
from tracker_sync.ingestion.providers.base.client import BaseHttpClient
from tracker_sync.ingestion.providers.base.errors import (
    ProviderMappingError,
    ProviderRateLimited,
    ProviderResponseError,
)


def test_api_sports_rate_limiter_paces_requests() -> None:
    sleeps: list[float] = []

    def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    t = 0.0

    def fake_monotonic() -> float:
        return t

    limiter = ApiSportsRateLimiter(_sleep=fake_sleep, _monotonic=fake_monotonic)
    limiter.min_interval_s = 1.0
    limiter.last_request_monotonic = 0.0

    t = 0.25
    limiter.before_request()
    assert sleeps == [0.75]


def test_api_sports_rate_limiter_uses_headers_for_minute_cooldown() -> None:
    sleeps: list[float] = []

    limiter = ApiSportsRateLimiter(
        _sleep=lambda s: sleeps.append(s),
        _monotonic=lambda: 123.0,
        minute_limit_low_watermark=2,
    )

    limiter.after_response({"X-RateLimit-Limit": "300", "X-RateLimit-Remaining": "1"})
    assert limiter.min_interval_s == pytest.approx(0.2)
    assert sleeps == [60.0]


def _client(handler: Any, **kwargs: Any) -> ApiFootballClient:
    http = BaseHttpClient(
        base_url="https://v3.football.api-sports.io", transport=httpx.MockTransport(handler)
    )
    return ApiFootballClient(http=http, api_key="secret", _sleep=lambda s: None, **kwargs)


def test_api_football_client_sends_rapidapi_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"errors": [], "response": [{"player": {"id": 7}}]})

    client = _client(handler)
    items = client.get_response_items("/players", params={"search": "Vinicius", "season": "2024"})

    assert items == [{"player": {"id": 7}}]
    assert seen[0].headers["x-rapidapi-key"] == "secret"
    assert seen[0].headers["x-rapidapi-host"] == "v3.football.api-sports.io"
    assert seen[0].url.params["search"] == "Vinicius"


def test_api_football_client_raises_on_provider_errors_object() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errors": {"token": "Invalid key"}, "response": []})

    client = _client(handler)
    with pytest.raises(ProviderResponseError):
        client.get("/players")


def test_api_football_client_rejects_non_list_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"errors": [], "response": {"oops": True}})

    client = _client(handler)
    with pytest.raises(ProviderMappingError):
        client.get_response_items("/players")


def test_api_football_client_retries_rate_limited_requests() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] == 1:
            return httpx.Response(429, json={})
        return httpx.Response(200, json={"errors": [], "response": []})

    client = _client(handler)
    assert client.get_response_items("/fixtures") == []
    assert calls["n"] == 2


def test_api_football_client_gives_up_after_max_attempts() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={})

    client = _client(handler, max_attempts=2)
    with pytest.raises(ProviderRateLimited):
        client.get("/fixtures")
