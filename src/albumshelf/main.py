"""FastAPI application factory.

Run with:
    uvicorn albumshelf.main:app

or `albumshelf` (console script), which reads host/port from the environment.
"""

import os

from fastapi import FastAPI

from albumshelf import __version__
from albumshelf.api.exception_handlers import register_exception_handlers
from albumshelf.api.routers import api_router, health, ui
from albumshelf.config import Settings, get_settings
from albumshelf.infrastructure.lifecycle import lifespan
from albumshelf.infrastructure.observability import RequestLoggingMiddleware


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use instead of the cached environment settings
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="AlbumShelf",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        RequestLoggingMiddleware,
        log_request_body=settings.observability.log_request_body,
    )
    register_exception_handlers(app)

    app.include_router(api_router, prefix="/api")
    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(ui.router, tags=["Pages"])

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "albumshelf.main:app",
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "8000")),
    )
