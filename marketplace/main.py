# marketplace/main.py (async version)

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from marketplace.adapters.configuration.config import Settings, settings as default_settings
from marketplace.adapters.container import ServiceContainer
from marketplace.adapters.inbound.api.v1.router import api_router
from marketplace.shared.middleware import (
    AsyncExceptionMiddleware,
    AsyncRequestLoggingMiddleware,
    AsyncRateLimitingMiddleware,
    AsyncAPIKeyMiddleware,
)
from marketplace.shared.middleware.exception_middleware import validation_exception_handler

# ─── UNIQUE LOGGING CONFIGURATION ─────────────────────────────────────────────────
level = logging.DEBUG if default_settings.DEBUG else getattr(logging, default_settings.LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Builds the service container on startup (unless one was injected)
    and releases its handles on shutdown.
    """
    logger.info("Application starting up...")
    container: Optional[ServiceContainer] = getattr(app.state, "container", None)
    owned = container is None
    if owned:
        container = ServiceContainer.from_settings(app.state.settings)
        app.state.container = container
        await container.startup()

    yield

    logger.info("Application shutting down...")
    if owned:
        await container.shutdown()


def create_app(settings: Optional[Settings] = None, container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Configuration, the environment-loaded settings by default
        container: Prebuilt handles; when given, the lifespan neither
            creates nor closes them
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Marketplace",
        description="Marketplace backend: registration, authentication and sessions",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings
    if container is not None:
        app.state.container = container

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Last added runs first: exceptions wrap everything, the gatekeeper runs last
    app.add_middleware(AsyncAPIKeyMiddleware)
    app.add_middleware(AsyncRateLimitingMiddleware)
    app.add_middleware(AsyncRequestLoggingMiddleware)
    app.add_middleware(AsyncExceptionMiddleware)

    app.include_router(api_router)

    @app.get("/", response_class=PlainTextResponse, tags=["Root"])
    async def root():
        return "Hello, World!"

    @app.get("/health", tags=["Root"])
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("marketplace.main:app", host="0.0.0.0", port=8080)
