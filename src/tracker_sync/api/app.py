from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tracker_sync.api.routes import functions
from tracker_sync.core.config import settings
from tracker_sync.core.logging_config import configure_logging


def create_app() -> FastAPI:
    configure_logging("tracker-sync-api", settings.environment, settings.log_level)

    app = FastAPI(title="tracker-sync", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(functions.router)

    @app.get("/healthz")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
