"""Dependency injection for API endpoints."""

import logging
from collections.abc import AsyncGenerator
from typing import cast

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from albumshelf.application.services.album_reconciler import AlbumReconciler
from albumshelf.application.use_cases.import_album import ImportAlbumUseCase
from albumshelf.config import Settings, get_settings
from albumshelf.domain.entities import AdminSession
from albumshelf.infrastructure.integrations.registry import FetcherRegistry
from albumshelf.infrastructure.persistence.database import Database
from albumshelf.infrastructure.persistence.repositories import (
    AdminSessionRepository,
    AlbumRepository,
    SongRepository,
)

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with (falls back to the cached env settings)."""
    settings = getattr(request.app.state, "settings", None)
    return cast(Settings, settings) if settings is not None else get_settings()


def get_database(request: Request) -> Database:
    """Get the Database from app state.

    Raises:
        HTTPException: 503 if startup has not run
    """
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise HTTPException(status_code=503, detail="Database not initialized")
    return cast(Database, db)


# Hey future me - ONE session per request. session_scope() commits when the endpoint
# returns and rolls back when it raises, so a failed import (ImportFailedError thrown
# through this generator) leaves nothing behind. That late commit runs after the
# response is built, so writes that must be confirmed (the import) commit themselves
# first, see AlbumReconciler._commit.
async def get_db_session(
    db: Database = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """Get a request-scoped database session."""
    async with db.session_scope() as session:
        yield session


def get_fetcher_registry(request: Request) -> FetcherRegistry:
    """Get the fetcher registry built at startup.

    Raises:
        HTTPException: 503 if startup has not run
    """
    registry = getattr(request.app.state, "fetcher_registry", None)
    if registry is None:
        raise HTTPException(status_code=503, detail="Metadata fetchers not initialized")
    return cast(FetcherRegistry, registry)


def get_album_repository(
    session: AsyncSession = Depends(get_db_session),
) -> AlbumRepository:
    """Get album repository bound to the request session."""
    return AlbumRepository(session)


def get_album_reconciler(
    session: AsyncSession = Depends(get_db_session),
) -> AlbumReconciler:
    """Get reconciler whose repositories share the request session."""
    return AlbumReconciler(session, AlbumRepository(session), SongRepository(session))


def get_import_album_use_case(
    registry: FetcherRegistry = Depends(get_fetcher_registry),
    reconciler: AlbumReconciler = Depends(get_album_reconciler),
) -> ImportAlbumUseCase:
    """Get the album import use case."""
    return ImportAlbumUseCase(registry, reconciler)


def parse_bearer_token(authorization: str) -> str:
    """Parse Authorization header to extract session ID.

    Handles both "Bearer {token}" and raw token formats (prefix is case-insensitive).
    """
    if authorization.lower().startswith("bearer "):
        return authorization[7:].strip()
    return authorization.strip()


async def get_session_id(
    request: Request,
    authorization: str | None = Header(None),
    settings: Settings = Depends(get_app_settings),
) -> str | None:
    """Extract session ID from the Authorization header or the session cookie.

    Header wins over cookie; a blank header falls back to the cookie.
    """
    if authorization and authorization.strip():
        return parse_bearer_token(authorization) or None
    return request.cookies.get(settings.auth.session_cookie_name) or None


async def get_admin_session(
    session_id: str | None = Depends(get_session_id),
    session: AsyncSession = Depends(get_db_session),
) -> AdminSession | None:
    """Resolve the caller's admin session, or None if missing/unknown/expired."""
    if not session_id:
        return None
    admin_session = await AdminSessionRepository(session).get(session_id)
    if admin_session is None:
        logger.debug("Unknown session id presented")
        return None
    if admin_session.is_expired():
        logger.info("Expired session for %s", admin_session.email)
        return None
    return admin_session
