"""Integration tests for the album import and listing endpoints."""

from unittest.mock import MagicMock

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from albumshelf.domain.exceptions import MISSING_URL_HINT, UNSUPPORTED_URL_HINT
from albumshelf.infrastructure.persistence import SongRepository

DEEZER_URL = "https://www.deezer.com/en/album/302127"


class TestImportValidation:
    """Missing input answers 400 with the form's hint."""

    @pytest.mark.parametrize(
        "body",
        [b"", b"{}", b'{"url": ""}', b'{"url": "   "}', b'{"url": 42}', b"not json", b"[]"],
    )
    async def test_missing_url_is_400(self, client: AsyncClient, body: bytes) -> None:
        response = await client.post(
            "/api/albums/import",
            content=body,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": MISSING_URL_HINT}


class TestImportFailures:
    """Pipeline failures answer 500 with the underlying message."""

    async def test_unsupported_url(self, client: AsyncClient) -> None:
        response = await client.post("/api/albums/import", json={"url": "not a url"})

        assert response.status_code == 500
        assert response.json() == {"error": UNSUPPORTED_URL_HINT}

    async def test_provider_down(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/albums/import",
            json={"url": "https://music.apple.com/us/album/x/1440857781"},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "iTunes lookup failed: 503"}

    async def test_album_not_found(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/albums/import", json={"url": "https://www.deezer.com/album/1"}
        )

        assert response.status_code == 500
        assert "not found" in response.json()["error"]

    async def test_failed_import_leaves_nothing_behind(
        self, client: AsyncClient, mocker: MagicMock
    ) -> None:
        mocker.patch.object(SongRepository, "add", side_effect=RuntimeError("disk full"))

        response = await client.post("/api/albums/import", json={"url": DEEZER_URL})

        assert response.status_code == 500
        assert "disk full" in response.json()["error"]
        listing = await client.get("/api/albums")
        assert listing.json() == {"albums": [], "total": 0}

    async def test_commit_failure_is_500(
        self, client: AsyncClient, mocker: MagicMock
    ) -> None:
        mocker.patch.object(
            AsyncSession,
            "commit",
            side_effect=OperationalError("COMMIT", {}, Exception("database is locked")),
        )

        response = await client.post("/api/albums/import", json={"url": DEEZER_URL})

        assert response.status_code == 500
        assert "database is locked" in response.json()["error"]

        mocker.stopall()
        listing = await client.get("/api/albums")
        assert listing.json() == {"albums": [], "total": 0}


class TestImportSuccess:
    """Happy path and idempotence."""

    async def test_imports_album_with_songs(self, client: AsyncClient) -> None:
        response = await client.post("/api/albums/import", json={"url": DEEZER_URL})

        assert response.status_code == 200
        album = response.json()["album"]
        assert album["title"] == "Discovery"
        assert album["artist"] == "Daft Punk"
        assert album["link"] == DEEZER_URL
        assert album["image_url"] == "https://cdn.test/discovery-1000.jpg"
        assert [s["title"] for s in album["songs"]] == [
            "Aerodynamic",
            "Digital Love",
            "One More Time",
        ]
        assert album["songs"][1]["link"] == "https://cdn.test/digital-love.mp3"

    async def test_reimport_is_idempotent(self, client: AsyncClient) -> None:
        first = await client.post("/api/albums/import", json={"url": DEEZER_URL})
        second = await client.post("/api/albums/import", json={"url": DEEZER_URL})

        assert first.json()["album"]["id"] == second.json()["album"]["id"]
        listing = (await client.get("/api/albums")).json()
        assert listing["total"] == 1
        assert listing["albums"][0]["song_count"] == 3


class TestListAlbums:
    """GET /api/albums."""

    async def test_empty(self, client: AsyncClient) -> None:
        response = await client.get("/api/albums")

        assert response.status_code == 200
        assert response.json() == {"albums": [], "total": 0}

    async def test_invalid_limit_is_422(self, client: AsyncClient) -> None:
        response = await client.get("/api/albums", params={"limit": 0})

        assert response.status_code == 422
