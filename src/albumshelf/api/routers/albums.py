"""Album import and listing endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, Request
from pydantic import ValidationError

from albumshelf.api.dependencies import get_album_repository, get_import_album_use_case
from albumshelf.api.schemas.albums import (
    AlbumListResponse,
    AlbumResponse,
    AlbumSummaryResponse,
    ImportAlbumPayload,
    ImportAlbumResponse,
)
from albumshelf.application.use_cases.import_album import (
    ImportAlbumRequest,
    ImportAlbumUseCase,
)
from albumshelf.domain.exceptions import BadRequestError
from albumshelf.infrastructure.persistence.repositories import AlbumRepository

logger = logging.getLogger(__name__)

router = APIRouter()


# Hey future me - the body is parsed by hand instead of as a typed parameter. A missing
# body, broken JSON or a non-string url must all answer 400 {"error": "Provide { url: string }"},
# and a typed Body() parameter would turn those into FastAPI's 422 first.
async def _read_payload(request: Request) -> ImportAlbumPayload:
    raw = await request.body()
    if not raw.strip():
        raise BadRequestError()
    try:
        return ImportAlbumPayload.model_validate_json(raw)
    except ValidationError as e:
        logger.debug("Unreadable import payload: %s", e)
        raise BadRequestError() from e


@router.post("/import", response_model=ImportAlbumResponse)
async def import_album(
    request: Request,
    use_case: ImportAlbumUseCase = Depends(get_import_album_use_case),
) -> ImportAlbumResponse:
    """Import an album from an Apple Music / iTunes or Deezer URL.

    Fetches the album with its track list and stores it, updating the existing
    album when the same URL (or the same title + artist) was imported before.

    Errors:
        400 {"error": ...}: url missing or blank
        500 {"error": ...}: unsupported URL, provider failure, storage failure
    """
    payload = await _read_payload(request)
    if payload.url is None or not payload.url.strip():
        raise BadRequestError()

    result = await use_case.execute(ImportAlbumRequest(url=payload.url))
    return ImportAlbumResponse(album=AlbumResponse.from_entity(result.album))


@router.get("", response_model=AlbumListResponse)
async def list_albums(
    limit: int | None = Query(default=None, ge=1, le=500),
    repository: AlbumRepository = Depends(get_album_repository),
) -> AlbumListResponse:
    """List albums, newest first, with song counts."""
    summaries = await repository.list_with_song_counts(limit=limit)
    return AlbumListResponse(
        albums=[AlbumSummaryResponse.from_summary(s) for s in summaries],
        total=len(summaries),
    )
