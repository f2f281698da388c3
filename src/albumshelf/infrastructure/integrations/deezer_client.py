"""Deezer HTTP client implementation for album metadata.

Hey future me - Deezer's public API works WITHOUT authentication! One call:

    GET https://api.deezer.com/album/302127

returns title, nested artist.name, the track list under tracks.data and up to four
cover sizes. Two Deezer quirks to remember:

1. "Not found" is NOT a 404. Deezer answers 200 with {"error": {"code": 800, ...}}.
2. Quota exceeded is also a 200 with {"error": {"code": 4, ...}}. We don't retry
   (imports are one-shot), we surface it as an upstream failure.
"""

import logging
from typing import Any

import httpx

from albumshelf.domain.entities import NormalizedAlbum, NormalizedSong, Provider
from albumshelf.domain.exceptions import AlbumNotFoundError, UpstreamFetchError
from albumshelf.domain.ports import IAlbumMetadataFetcher
from albumshelf.infrastructure.integrations.itunes_client import NO_CACHE_HEADERS

logger = logging.getLogger(__name__)

# Descending preference: 1000x1000, 500x500, 250x250, 120x120
COVER_FIELDS = ("cover_xl", "cover_big", "cover_medium", "cover")

DEEZER_QUOTA_ERROR_CODE = 4


class DeezerClient(IAlbumMetadataFetcher):
    """Album metadata fetcher backed by the Deezer public API."""

    provider = Provider.DEEZER

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "https://api.deezer.com",
    ) -> None:
        """Initialize Deezer client.

        Args:
            client: Shared httpx client (see HttpClientPool)
            base_url: API root, overridable for tests
        """
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def fetch(self, album_id: str) -> NormalizedAlbum:
        """Get album details by ID.

        Args:
            album_id: Deezer album ID

        Returns:
            NormalizedAlbum with the best available cover and songs in provider order

        Raises:
            UpstreamFetchError: Non-2xx status, quota error or transport failure
            AlbumNotFoundError: Deezer error payload or album without title
        """
        name = self.provider.display_name
        try:
            response = await self._client.get(
                f"{self._base_url}/album/{album_id}",
                headers=NO_CACHE_HEADERS,
            )
        except httpx.HTTPError as e:
            logger.error("Deezer album fetch for %s failed: %s", album_id, e)
            raise UpstreamFetchError(name, None, str(e)) from e

        if not response.is_success:
            raise UpstreamFetchError(name, response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise AlbumNotFoundError(name, album_id, "response is not JSON") from e

        if not isinstance(data, dict):
            raise AlbumNotFoundError(name, album_id, "unexpected response shape")

        if "error" in data:
            error = data.get("error") or {}
            code = error.get("code") if isinstance(error, dict) else None
            if code == DEEZER_QUOTA_ERROR_CODE:
                raise UpstreamFetchError(name, 429, "quota exceeded")
            raise AlbumNotFoundError(
                name,
                album_id,
                error.get("message", "error payload") if isinstance(error, dict) else None,
            )

        return self._parse_album(data, album_id)

    def _parse_album(self, data: dict[str, Any], album_id: str) -> NormalizedAlbum:
        """Parse Deezer album response into a NormalizedAlbum."""
        name = self.provider.display_name
        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise AlbumNotFoundError(name, album_id, "album has no title")

        artist_data = data.get("artist") or {}
        artist = artist_data.get("name") if isinstance(artist_data, dict) else None

        image_url = next((data[f] for f in COVER_FIELDS if data.get(f)), None)

        tracks_data = data.get("tracks") or {}
        tracks = tracks_data.get("data") if isinstance(tracks_data, dict) else None

        songs: list[NormalizedSong] = []
        for track in tracks or []:
            if not isinstance(track, dict):
                continue
            track_title = track.get("title")
            if not isinstance(track_title, str) or not track_title.strip():
                logger.warning(
                    "Skipping Deezer track without title in album %s (id=%s)",
                    album_id,
                    track.get("id"),
                )
                continue
            songs.append(
                NormalizedSong(
                    title=track_title,
                    # link = deezer.com track page, preview = 30-second mp3
                    link=track.get("link") or track.get("preview") or None,
                )
            )

        return NormalizedAlbum(
            title=title,
            artist=artist or "Unknown Artist",
            image_url=image_url,
            songs=songs,
        )
