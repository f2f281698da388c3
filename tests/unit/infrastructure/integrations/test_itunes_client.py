"""Tests for the iTunes lookup client."""

from typing import Any

import httpx
import pytest

from albumshelf.domain.exceptions import AlbumNotFoundError, UpstreamFetchError
from albumshelf.infrastructure.integrations.itunes_client import (
    ItunesClient,
    upscale_artwork_url,
)

ARTWORK_100 = (
    "https://is1-ssl.mzstatic.com/image/thumb/Music115/v4/ab/cd/ef/100x100-src/"
    "196589123456.jpg/100x100bb.jpg"
)


def _lookup_payload(**album_overrides: Any) -> dict[str, Any]:
    album = {
        "wrapperType": "collection",
        "collectionId": 1524801260,
        "collectionName": "folklore",
        "artistName": "Taylor Swift",
        "artworkUrl100": ARTWORK_100,
    }
    album.update(album_overrides)
    return {
        "resultCount": 4,
        "results": [
            album,
            {
                "wrapperType": "track",
                "trackId": 1,
                "trackName": "the 1",
                "trackViewUrl": "https://music.apple.com/us/album/folklore/1524801260?i=1",
                "previewUrl": "https://audio-ssl.itunes.apple.com/preview1.m4a",
            },
            {
                "wrapperType": "track",
                "trackId": 2,
                "trackName": "cardigan",
                "previewUrl": "https://audio-ssl.itunes.apple.com/preview2.m4a",
            },
            {"wrapperType": "track", "trackId": 3, "trackName": "   "},
            {"wrapperType": "track", "trackId": 4, "trackName": "exile"},
        ],
    }


def _client(handler: Any) -> ItunesClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ItunesClient(http, base_url="https://itunes.test")


class TestUpscaleArtworkUrl:
    """Artwork size rewrite."""

    def test_replaces_size_in_last_segment_only(self) -> None:
        result = upscale_artwork_url(ARTWORK_100)
        assert result is not None
        assert result.endswith("/1000x1000bb.jpg")
        assert "/100x100-src/" in result

    def test_none_and_empty(self) -> None:
        assert upscale_artwork_url(None) is None
        assert upscale_artwork_url("") is None

    def test_url_without_size_token_is_unchanged(self) -> None:
        url = "https://example.com/cover.jpg"
        assert upscale_artwork_url(url) == url


class TestItunesClientFetch:
    """fetch() against a mocked transport."""

    async def test_builds_lookup_request(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_lookup_payload())

        await _client(handler).fetch("1524801260")

        request = seen[0]
        assert request.url.path == "/lookup"
        assert request.url.params["id"] == "1524801260"
        assert request.url.params["entity"] == "song"
        assert request.headers["Cache-Control"] == "no-cache"

    async def test_normalizes_album_and_tracks(self) -> None:
        client = _client(lambda request: httpx.Response(200, json=_lookup_payload()))

        album = await client.fetch("1524801260")

        assert album.title == "folklore"
        assert album.artist == "Taylor Swift"
        assert album.image_url is not None
        assert album.image_url.endswith("/1000x1000bb.jpg")
        # Blank title skipped, provider order kept
        assert [s.title for s in album.songs] == ["the 1", "cardigan", "exile"]
        assert album.songs[0].link.endswith("?i=1")
        assert album.songs[1].link == "https://audio-ssl.itunes.apple.com/preview2.m4a"
        assert album.songs[2].link is None

    async def test_missing_artist_falls_back(self) -> None:
        payload = _lookup_payload(artistName=None)
        album = await _client(lambda r: httpx.Response(200, json=payload)).fetch("1")
        assert album.artist == "Unknown Artist"

    async def test_non_success_status_raises_upstream_error(self) -> None:
        client = _client(lambda r: httpx.Response(503, text="unavailable"))
        with pytest.raises(UpstreamFetchError) as exc_info:
            await client.fetch("1")
        assert exc_info.value.status == 503
        assert exc_info.value.message == "iTunes lookup failed: 503"

    async def test_transport_error_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamFetchError) as exc_info:
            await _client(handler).fetch("1")
        assert exc_info.value.status is None

    async def test_no_collection_raises_not_found(self) -> None:
        client = _client(
            lambda r: httpx.Response(200, json={"resultCount": 0, "results": []})
        )
        with pytest.raises(AlbumNotFoundError):
            await client.fetch("999")

    async def test_collection_without_title_raises_not_found(self) -> None:
        payload = _lookup_payload(collectionName="")
        with pytest.raises(AlbumNotFoundError):
            await _client(lambda r: httpx.Response(200, json=payload)).fetch("1")
