"""Application lifecycle management for startup and shutdown tasks.

Startup: logging → SQLite path check → Database → shared HTTP client → fetcher registry.
Shutdown runs in reverse. Everything routes need lives on app.state
(db, fetcher_registry, settings).

Schema is NOT created here; run `alembic upgrade head` before the first start.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from albumshelf.config import Settings, get_settings
from albumshelf.domain.exceptions import ConfigurationError
from albumshelf.infrastructure.integrations import HttpClientPool, build_fetcher_registry
from albumshelf.infrastructure.observability import configure_logging
from albumshelf.infrastructure.persistence import Database

logger = logging.getLogger(__name__)


# Hey future me, this runs BEFORE the engine exists. SQLite wants to create the .db file
# plus -journal/-wal files next to it, so the parent directory must exist and be writable.
# Failing here gives a readable error instead of "unable to open database file" later.
def _validate_sqlite_path(settings: Settings) -> None:
    """Ensure the SQLite database directory exists and is writable."""
    db_path = settings._get_sqlite_db_path()
    if db_path is None:
        return

    try:
        if str(db_path.parent) != ".":
            db_path.parent.mkdir(parents=True, exist_ok=True)
        probe = db_path.parent / f".{db_path.stem}_write_test"
        probe.write_bytes(b"test")
        probe.unlink()
    except OSError as exc:
        raise ConfigurationError(
            f"SQLite database directory '{db_path.parent}' is not writable: {exc}. "
            "Update DATABASE__URL or adjust directory permissions."
        ) from exc
    logger.debug("Verified SQLite directory: %s", db_path.parent)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    app.state.settings = settings

    configure_logging(
        log_level=settings.log_level,
        json_format=settings.observability.log_json_format,
        app_name=settings.app_name,
    )
    logger.info("Starting application: %s", settings.app_name)

    _validate_sqlite_path(settings)

    db = Database(settings)
    app.state.db = db
    logger.info("Database initialized: %s", settings.database.url)

    try:
        client = await HttpClientPool.get_client(
            timeout=settings.providers.timeout,
            user_agent=settings.providers.user_agent,
        )
        registry = build_fetcher_registry(client, settings)
        app.state.fetcher_registry = registry
        logger.info(
            "Metadata fetchers ready: %s",
            ", ".join(p.display_name for p in registry.providers()),
        )

        yield
    finally:
        logger.info("Shutting down application")
        await HttpClientPool.close()
        await db.close()
        logger.info("Application shutdown complete")
