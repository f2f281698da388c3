"""HTML pages: the albums table and the admin import page."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from albumshelf.api.dependencies import (
    get_admin_session,
    get_album_repository,
    get_app_settings,
)
from albumshelf.config import Settings
from albumshelf.domain.entities import AdminSession
from albumshelf.domain.exceptions import UNSUPPORTED_URL_HINT
from albumshelf.infrastructure.persistence.repositories import AlbumRepository

logger = logging.getLogger(__name__)

# Relative to this file so it works from the source tree and from site-packages
_TEMPLATES_DIR = Path(__file__).parent.parent.parent / "templates"
templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))


def format_album_date(value: datetime | None) -> str:
    """Format a timestamp as 'Mon DD, YYYY' (e.g. 'Mar 07, 2025')."""
    if value is None:
        return ""
    return value.strftime("%b %d, %Y")


templates.env.filters["album_date"] = format_album_date

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def albums_page(
    request: Request,
    limit: int | None = Query(default=None, ge=1, le=500),
    repository: AlbumRepository = Depends(get_album_repository),
) -> Any:
    """Public albums table, newest first."""
    summaries = await repository.list_with_song_counts(limit=limit)
    return templates.TemplateResponse(
        request,
        "albums.html",
        context={"summaries": summaries},
    )


# Hey future me - only THIS page is guarded. Sign-in itself lives with the identity
# provider at auth.signin_url; we just read the session row it wrote.
# No session → go sign in. Signed in as someone else → back to the public table.
@router.get("/secret", response_class=HTMLResponse)
async def import_page(
    request: Request,
    admin_session: AdminSession | None = Depends(get_admin_session),
    settings: Settings = Depends(get_app_settings),
) -> Any:
    """Admin page with the album import form."""
    if admin_session is None:
        return RedirectResponse(url=settings.auth.signin_url, status_code=303)

    allowed = settings.auth.allowed_email
    if not allowed or admin_session.email.strip().casefold() != allowed.strip().casefold():
        logger.warning("Rejected import page access for %s", admin_session.email)
        return RedirectResponse(url="/", status_code=303)

    return templates.TemplateResponse(
        request,
        "secret.html",
        context={"email": admin_session.email, "url_hint": UNSUPPORTED_URL_HINT},
    )
