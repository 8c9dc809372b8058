"""Application factory for the FastAPI app.

Builds the store backend, its rate limiter and the ParameterTree service
inside the app lifespan, so the backend is initialized on startup and
released on shutdown, and wires middleware, handlers and routers.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from paramtree.adapters.store.factory import create_parameter_store, create_rate_limiter
from paramtree.api.routes import config_router, health_router
from paramtree.core.config import StoreSettings, settings
from paramtree.core.exception_handlers import setup_exception_handlers
from paramtree.core.logging import configure_logging
from paramtree.core.middleware import request_id_middleware
from paramtree.services.parameter_tree import ParameterTree

logger = logging.getLogger(__name__)


def _build_lifespan(store_settings: StoreSettings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        store = create_parameter_store(store_settings)
        await store.init()
        app.state.parameter_tree = ParameterTree(
            store,
            create_rate_limiter(store_settings),
            secure=store_settings.effective_secure,
        )
        logger.info(
            "app.startup",
            extra={
                "store_backend": store.backend_name,
                "requests_per_second": store_settings.effective_requests_per_second,
            },
        )
        try:
            yield
        finally:
            await store.close()
            logger.info("app.shutdown", extra={"store_backend": store.backend_name})

    return lifespan


def create_app(store_settings: StoreSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        store_settings: Optional store settings; defaults to global settings.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="paramtree",
        description=(
            "Stores nested configuration trees as flat, path-addressed parameters "
            "(AWS SSM Parameter Store or a local SQLite store) and reads them back."
        ),
        version="0.1.0",
        lifespan=_build_lifespan(store_settings or settings.store),
    )

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(config_router, prefix="/v1")
    app.include_router(health_router)

    return app
