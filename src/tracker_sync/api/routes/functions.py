"""Trigger endpoints for the sync jobs and the balldontlie id discovery."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from tracker_sync.api.deps import (
    DiscoveryAdapterFactory,
    get_discovery_adapter_factory,
    get_registry,
    get_session,
    get_settings,
)
from tracker_sync.core.config import Settings
from tracker_sync.db.enums import SportEnum
from tracker_sync.ingestion.discovery import discover_balldontlie_id
from tracker_sync.ingestion.jobs import run_sport_sync
from tracker_sync.ingestion.providers.base.registry import AdapterRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions", tags=["functions"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

SYNC_FUNCTIONS: dict[str, SportEnum] = {
    "fetch-football-stats": SportEnum.FOOTBALL,
    "fetch-nba-stats": SportEnum.BASKETBALL,
    "fetch-basketball-stats": SportEnum.BASKETBALL,
}


def _now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()


def _failure(e: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(e) or e.__class__.__name__},
        headers=CORS_HEADERS,
    )


def _preflight() -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


def _sync_endpoint(sport: SportEnum):
    def endpoint(
        session: Session = Depends(get_session),
        registry: AdapterRegistry = Depends(get_registry),
        app_settings: Settings = Depends(get_settings),
    ) -> JSONResponse:
        try:
            run = run_sport_sync(session, sport, registry=registry, settings=app_settings)
        except Exception as e:
            logger.exception("sync run failed", extra={"sport": sport.value})
            return _failure(e)

        content: dict[str, Any] = {
            "success": True,
            "timestamp": _now_iso(),
            "api": run.api,
            "sport": run.sport.value,
            "results": [r.to_dict() for r in run.results],
        }
        return JSONResponse(content=content, headers=CORS_HEADERS)

    endpoint.__name__ = f"sync_{sport.value}"
    return endpoint


for _name, _sport in SYNC_FUNCTIONS.items():
    router.add_api_route(f"/{_name}", _sync_endpoint(_sport), methods=["GET", "POST"])
    router.add_api_route(f"/{_name}", _preflight, methods=["OPTIONS"], include_in_schema=False)


@router.api_route("/test-balldontlie", methods=["GET", "POST"])
def test_balldontlie(
    session: Session = Depends(get_session),
    adapter_factory: DiscoveryAdapterFactory = Depends(get_discovery_adapter_factory),
) -> JSONResponse:
    try:
        adapter = adapter_factory()
        try:
            result = discover_balldontlie_id(session, adapter)
        finally:
            adapter.close()
    except Exception as e:
        logger.exception("balldontlie discovery failed")
        return _failure(e)
    return JSONResponse(content=result.to_dict(), headers=CORS_HEADERS)


router.add_api_route("/test-balldontlie", _preflight, methods=["OPTIONS"], include_in_schema=False)
