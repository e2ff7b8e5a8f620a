"""FastAPI service exposing the pantry ledger."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from pantry.config import load_settings
from pantry.service import open_pantry

from . import http

LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Open the pantry on application startup and close it on shutdown.
    Settings are read from the environment at startup so tests can point
    ``PANTRY_DB_PATH`` or ``PANTRY_STORE`` at isolated state.
    """

    settings = load_settings()
    pantry = open_pantry(settings)
    app.state.pantry = pantry
    LOGGER.info("Pantry service started", extra={"store": settings.store})
    try:
        yield
    finally:
        pantry.close()
        app.state.pantry = None
        LOGGER.info("Pantry service stopped")


app = FastAPI(title="Pantry Ledger", version="0.1.0", lifespan=lifespan)

metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)
app.include_router(http.router)
app.include_router(http.events_router)


@app.get("/health", include_in_schema=False)
def health() -> Dict[str, str]:
    """Return a simple status payload for health checks."""

    return {"status": "ok"}


__all__ = ["app", "lifespan"]
