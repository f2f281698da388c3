"""iTunes lookup client: fetches an album and its tracks by collection id.

Hey future me - the iTunes Search API needs NO auth. One call gives us everything:

    GET https://itunes.apple.com/lookup?id=1524809890&entity=song

The response is a FLAT list in `results`: one entity with wrapperType="collection"
(the album) followed by entities with wrapperType="track". There is no nesting,
so we pick them apart by wrapperType.

Artwork comes as artworkUrl100 (100x100). The CDN serves any size if you change the
size token in the filename, so ".../100x100bb.jpg" becomes ".../1000x1000bb.jpg"
without a second request.
"""

import logging
import re
from typing import Any

import httpx

from albumshelf.domain.entities import NormalizedAlbum, NormalizedSong, Provider
from albumshelf.domain.exceptions import AlbumNotFoundError, UpstreamFetchError
from albumshelf.domain.ports import IAlbumMetadataFetcher

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}

# "100x100" size token in the LAST path segment only
_ARTWORK_SIZE_PATTERN = re.compile(r"/100x100(?=[^/]*$)")


def upscale_artwork_url(url: str | None) -> str | None:
    """Swap the 100x100 size token of an iTunes artwork URL for 1000x1000."""
    if not url:
        return None
    return _ARTWORK_SIZE_PATTERN.sub("/1000x1000", url, count=1)


class ItunesClient(IAlbumMetadataFetcher):
    """Album metadata fetcher backed by the iTunes lookup endpoint."""

    provider = Provider.ITUNES

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "https://itunes.apple.com",
    ) -> None:
        """Initialize iTunes client.

        Args:
            client: Shared httpx client (see HttpClientPool)
            base_url: API root, overridable for tests/mirrors
        """
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def fetch(self, album_id: str) -> NormalizedAlbum:
        """Look up an album with its songs.

        Args:
            album_id: iTunes collection id

        Returns:
            NormalizedAlbum with upscaled artwork and songs in provider order

        Raises:
            UpstreamFetchError: Non-2xx status or transport failure
            AlbumNotFoundError: No collection entity (or no title) in the response
        """
        name = self.provider.display_name
        try:
            response = await self._client.get(
                f"{self._base_url}/lookup",
                params={"id": album_id, "entity": "song"},
                headers=NO_CACHE_HEADERS,
            )
        except httpx.HTTPError as e:
            logger.error("iTunes lookup for %s failed: %s", album_id, e)
            raise UpstreamFetchError(name, None, str(e)) from e

        if not response.is_success:
            raise UpstreamFetchError(name, response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise AlbumNotFoundError(name, album_id, "response is not JSON") from e

        return self._parse_lookup(payload, album_id)

    def _parse_lookup(self, payload: Any, album_id: str) -> NormalizedAlbum:
        """Split the flat lookup result list into album + tracks."""
        name = self.provider.display_name
        results = payload.get("results") if isinstance(payload, dict) else None
        entities = [r for r in (results or []) if isinstance(r, dict)]

        album = next(
            (r for r in entities if r.get("wrapperType") == "collection"), None
        )
        if album is None:
            raise AlbumNotFoundError(name, album_id, "no album in iTunes response")

        title = album.get("collectionName")
        if not isinstance(title, str) or not title.strip():
            raise AlbumNotFoundError(name, album_id, "album has no title")

        songs: list[NormalizedSong] = []
        for track in entities:
            if track.get("wrapperType") != "track":
                continue
            track_title = track.get("trackName")
            if not isinstance(track_title, str) or not track_title.strip():
                logger.warning(
                    "Skipping iTunes track without title in album %s (trackId=%s)",
                    album_id,
                    track.get("trackId"),
                )
                continue
            songs.append(
                NormalizedSong(
                    title=track_title,
                    link=track.get("trackViewUrl") or track.get("previewUrl") or None,
                )
            )

        return NormalizedAlbum(
            title=title,
            artist=album.get("artistName") or "Unknown Artist",
            image_url=upscale_artwork_url(album.get("artworkUrl100")),
            songs=songs,
        )
