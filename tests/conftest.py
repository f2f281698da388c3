"""Shared fixtures: throwaway SQLite settings, database, session, and the app
wired to mocked provider APIs.
"""

from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from albumshelf.config import AuthSettings, DatabaseSettings, Settings
from albumshelf.infrastructure.integrations import build_fetcher_registry
from albumshelf.infrastructure.persistence import Database
from albumshelf.main import create_app

ADMIN_EMAIL = "admin@example.com"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"),
        auth=AuthSettings(allowed_email=ADMIN_EMAIL),
    )


@pytest.fixture
async def db(settings: Settings) -> AsyncGenerator[Database, None]:
    """Database with all tables created."""
    database = Database(settings)
    await database.create_tables()
    yield database
    await database.close()


@pytest.fixture
async def session(db: Database) -> AsyncGenerator[AsyncSession, None]:
    """One session for the whole test, committed at teardown."""
    async with db.session_scope() as s:
        yield s


DEEZER_ALBUM = {
    "id": 302127,
    "title": "Discovery",
    "artist": {"name": "Daft Punk"},
    "cover_xl": "https://cdn.test/discovery-1000.jpg",
    "tracks": {
        "data": [
            {"title": "One More Time", "link": "https://www.deezer.com/track/1"},
            {"title": "Aerodynamic", "link": "https://www.deezer.com/track/2"},
            {"title": "Digital Love", "preview": "https://cdn.test/digital-love.mp3"},
        ]
    },
}


def provider_handler(request: httpx.Request) -> httpx.Response:
    """Fake iTunes/Deezer: Deezer album 302127 exists, everything else is missing."""
    if request.url.host == "deezer.test":
        if request.url.path == "/album/302127":
            return httpx.Response(200, json=DEEZER_ALBUM)
        return httpx.Response(200, json={"error": {"message": "no data", "code": 800}})
    if request.url.host == "itunes.test":
        return httpx.Response(503)
    return httpx.Response(404)


@pytest.fixture
def app(settings: Settings, db: Database) -> FastAPI:
    settings.providers.itunes_base_url = "https://itunes.test"
    settings.providers.deezer_base_url = "https://deezer.test"
    application = create_app(settings)
    application.state.db = db
    http = httpx.AsyncClient(transport=httpx.MockTransport(provider_handler))
    application.state.fetcher_registry = build_fetcher_registry(http, settings)
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, Any]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
