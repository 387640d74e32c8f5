"""Machine Router - FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from machine_router.api.v1 import machines as machines_api
from machine_router.api.v1.router import v1_router
from machine_router.config import Settings, settings
from machine_router.container import build_container
from machine_router.logging_config import configure_logging

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the app; collaborators are wired in the lifespan from `app_settings`."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(app_settings.log_level)
        logger.info("Starting Machine Router on port %s", app_settings.port)

        container = build_container(app_settings)
        app.state.container = container
        machines_api.set_handler(container.handler)

        yield

        logger.info("Shutting down Machine Router")
        machines_api.set_handler(None)

    app = FastAPI(
        title="Machine Router",
        description="Reserve, inspect and start shared machines",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.include_router(v1_router)
    return app


app = create_app()


def run() -> None:
    """Serve `app` with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())
