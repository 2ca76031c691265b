from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from tracker_sync.ingestion.providers.base.client import BaseHttpClient
from tracker_sync.ingestion.providers.base.errors import (
    ProviderMappingError,
    ProviderRateLimited,
    ProviderResponseError,
)

logger = logging.getLogger(__name__)


@dataclass
class BalldontlieClient:
    http: BaseHttpClient
    api_key: str
    max_attempts: int = 3
    rate_limit_backoff_s: float = 60.0

    _sleep: Any = field(default=time.sleep, repr=False)

    def _headers(self) -> dict[str, str]:
        # balldontlie expects the bare key, no "Bearer" prefix.
        return {"Authorization": self.api_key}

    def get(self, path: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        attempts = 0
        while True:
            attempts += 1
            try:
                data = self.http.get_json(path, params=params, headers=self._headers())
                break
            except ProviderRateLimited as e:
                if attempts >= self.max_attempts:
                    raise
                backoff = e.retry_after if e.retry_after is not None else self.rate_limit_backoff_s
                logger.warning(
                    "balldontlie rate limited, backing off",
                    extra={"path": path, "attempt": attempts, "backoff_s": backoff},
                )
                self._sleep(backoff)

        error = data.get("error")
        if error:
            raise ProviderResponseError(f"balldontlie returned an error: {error}")

        return data

    def get_items(self, path: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """`data` list of a collection endpoint."""
        payload = self.get(path, params=params)
        items = payload.get("data")
        if not isinstance(items, list):
            raise ProviderMappingError(
                "Expected 'data' list", context={"path": path, "type": str(type(items))}
            )
        return [i for i in items if isinstance(i, dict)]

    def get_all_items(
        self, path: str, params: Mapping[str, Any] | None = None, *, max_pages: int = 5
    ) -> list[dict[str, Any]]:
        """Follow `meta.next_cursor` until the collection is exhausted or `max_pages` is hit."""
        query = dict(params or {})
        out: list[dict[str, Any]] = []
        for _ in range(max_pages):
            payload = self.get(path, params=query)
            items = payload.get("data")
            if not isinstance(items, list):
                raise ProviderMappingError(
                    "Expected 'data' list", context={"path": path, "type": str(type(items))}
                )
            out.extend(i for i in items if isinstance(i, dict))

            meta = payload.get("meta") if isinstance(payload.get("meta"), dict) else {}
            cursor = meta.get("next_cursor")
            if not items or cursor is None:
                return out
            query["cursor"] = cursor

        logger.warning("balldontlie page limit reached", extra={"path": path, "pages": max_pages})
        return out

    def get_item(self, path: str, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """`data` object of a single-resource endpoint."""
        payload = self.get(path, params=params)
        item = payload.get("data")
        if not isinstance(item, dict):
            raise ProviderMappingError(
                "Expected 'data' object", context={"path": path, "type": str(type(item))}
            )
        return item

    def close(self) -> None:
        self.http.close()
