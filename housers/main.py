"""Application entry point for the Housers view-model service."""
from __future__ import annotations

import logging
from typing import Iterable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .clients.backend import close_backend_client
from .config import get_settings
from .routers import auth_router, feed_router, mentions_router, notifications_router, profiles_router
from .services import get_session_registry

logger = logging.getLogger(__name__)

settings = get_settings()
APP_NAME = settings.app_name
API_VERSION = settings.api_version

app = FastAPI(title=APP_NAME, version=API_VERSION)

if settings.cors_origins:
    origins: Iterable[str] = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
else:
    origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(feed_router)
app.include_router(mentions_router)
app.include_router(notifications_router)
app.include_router(profiles_router)


@app.on_event("startup")
async def _startup() -> None:
    logger.info("Housers view service starting | backend=%s", settings.backend_url)


@app.on_event("shutdown")
async def _shutdown() -> None:
    """Drop cached sessions and close the shared backend connection pool."""

    get_session_registry().close_all()
    await close_backend_client()


@app.get("/api", tags=["system"])
def api_info() -> dict[str, str]:
    return {"service": APP_NAME, "version": API_VERSION}


@app.get("/health", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
