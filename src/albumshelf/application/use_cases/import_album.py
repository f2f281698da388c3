"""Use case for importing an album from a pasted Apple Music / Deezer URL.

Hey future me - this is the WHOLE import pipeline in one place:

    URL → parse_album_url → fetcher.fetch → reconciler.reconcile → Album

Every failure along the way (unsupported URL, provider down, album missing,
database error) is logged here with its type and re-raised as ImportFailedError
carrying the original message. The API turns that into a 500 {"error": ...}.
The caller never sees a partial success: the request's session is rolled back
when the error leaves the endpoint.
"""

import logging
from dataclasses import dataclass

from albumshelf.application.services.album_reconciler import AlbumReconciler
from albumshelf.application.use_cases import UseCase
from albumshelf.domain.entities import Album, ParsedReference
from albumshelf.domain.exceptions import DomainException, ImportFailedError
from albumshelf.domain.value_objects import parse_album_url
from albumshelf.infrastructure.integrations.registry import FetcherRegistry

logger = logging.getLogger(__name__)


@dataclass
class ImportAlbumRequest:
    """Request to import one album.

    url is kept exactly as pasted (after trimming); it becomes Album.link.
    """

    url: str


@dataclass
class ImportAlbumResponse:
    """Stored album plus where it came from."""

    album: Album
    reference: ParsedReference


class ImportAlbumUseCase(UseCase[ImportAlbumRequest, ImportAlbumResponse]):
    """Classify, fetch and reconcile a single album URL."""

    def __init__(self, registry: FetcherRegistry, reconciler: AlbumReconciler) -> None:
        """Initialize use case.

        Args:
            registry: Provider → fetcher lookup
            reconciler: Writes the fetched album into storage
        """
        self._registry = registry
        self._reconciler = reconciler

    async def execute(self, request: ImportAlbumRequest) -> ImportAlbumResponse:
        """Execute the import.

        Raises:
            ImportFailedError: Any stage failed; message is the underlying error's
        """
        url = request.url.strip()
        try:
            reference = parse_album_url(url)
            fetcher = self._registry.get(reference.provider)
            data = await fetcher.fetch(reference.album_id)
            album = await self._reconciler.reconcile(url, data)
        except DomainException as e:
            logger.warning(
                "Album import failed for %s: %s: %s", url, type(e).__name__, e.message
            )
            raise ImportFailedError(e.message) from e
        except Exception as e:
            logger.exception("Unexpected error importing album from %s", url)
            raise ImportFailedError(str(e) or type(e).__name__) from e

        logger.info(
            "Imported %s album %s as '%s' (%d songs)",
            reference.provider.display_name,
            reference.album_id,
            album.title,
            len(album.songs),
        )
        return ImportAlbumResponse(album=album, reference=reference)
