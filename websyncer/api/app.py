"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from websyncer.admission.allowlist import AllowList
from websyncer.admission.buckets import utc_now
from websyncer.admission.controller import AdmissionController
from websyncer.api.routes.generate import router as generate_router
from websyncer.api.routes.health import router as health_router
from websyncer.api.routes.rate_limit import router as rate_limit_router
from websyncer.config.settings import Settings, get_settings
from websyncer.generation.proxy import GenerationProxy
from websyncer.storage.connection import close_all_connections
from websyncer.storage.counter_store import CounterStore, SqliteCounterStore
from websyncer.storage.schema import initialize_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    yield
    # Give in-flight counter writes a chance to land before exit
    app.state.admission_controller.close()
    close_all_connections()


def create_app(
    settings: Settings | None = None,
    store: Optional[CounterStore] = None,
    clock: Callable[[], datetime] = utc_now,
) -> FastAPI:
    """
    Build and return a fully wired FastAPI application.

    Configuration is resolved once here and injected into the admission
    controller and generation proxy; route handlers never read the
    environment. ``clock`` is the admission controller's UTC time source.
    """
    settings = settings or get_settings()
    if store is None:
        initialize_database(settings.db_path, settings.storage)
        store = SqliteCounterStore(settings.db_path, storage=settings.storage)

    app = FastAPI(
        title="WebSyncer API",
        version="0.1.0",
        description="Rate-limited proxy for marketing image generation",
        lifespan=_lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Shared state, read by routes via request.app.state
    rl = settings.rate_limit
    allowlist = AllowList.from_settings(rl)
    app.state.settings = settings
    app.state.counter_store = store
    app.state.admission_controller = AdmissionController(
        store, allowlist, settings=rl, clock=clock
    )
    app.state.generation_proxy = GenerationProxy(settings.generation)

    logger.info(
        "API configured: %d allow-listed addresses, provider key %s",
        len(allowlist),
        "present" if settings.generation.api_key else "MISSING",
    )

    app.include_router(health_router)
    app.include_router(generate_router)
    app.include_router(rate_limit_router)

    return app
