"""Tests for API dependency helpers."""

from datetime import UTC, datetime, timedelta

from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient

from albumshelf.api.dependencies import (
    get_admin_session,
    get_session_id,
    parse_bearer_token,
)
from albumshelf.config import Settings
from albumshelf.domain.entities import AdminSession
from albumshelf.infrastructure.persistence import AdminSessionRepository, Database


class TestParseBearerToken:
    """Authorization header parsing."""

    def test_strips_bearer_prefix(self) -> None:
        assert parse_bearer_token("Bearer abc123") == "abc123"

    def test_prefix_is_case_insensitive(self) -> None:
        assert parse_bearer_token("bEaReR abc123 ") == "abc123"

    def test_raw_token(self) -> None:
        assert parse_bearer_token("  abc123 ") == "abc123"


def _app(settings: Settings, db: Database | None = None) -> FastAPI:
    app = FastAPI()
    app.state.settings = settings
    app.state.db = db

    @app.get("/session-id")
    async def session_id(value: str | None = Depends(get_session_id)) -> dict:
        return {"session_id": value}

    @app.get("/admin")
    async def admin(admin_session: AdminSession | None = Depends(get_admin_session)) -> dict:
        return {"email": admin_session.email if admin_session else None}

    return app


class TestGetSessionId:
    """Session id from header or cookie."""

    async def test_header_wins_over_cookie(self, settings: Settings) -> None:
        transport = ASGITransport(app=_app(settings))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            client.cookies.set("session_id", "from-cookie")
            response = await client.get(
                "/session-id", headers={"Authorization": "Bearer from-header"}
            )
        assert response.json() == {"session_id": "from-header"}

    async def test_blank_header_falls_back_to_cookie(self, settings: Settings) -> None:
        transport = ASGITransport(app=_app(settings))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            client.cookies.set("session_id", "from-cookie")
            response = await client.get("/session-id", headers={"Authorization": "  "})
        assert response.json() == {"session_id": "from-cookie"}

    async def test_nothing_presented(self, settings: Settings) -> None:
        transport = ASGITransport(app=_app(settings))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/session-id")
        assert response.json() == {"session_id": None}


class TestGetAdminSession:
    """Session resolution against the database."""

    async def test_valid_unknown_and_expired_sessions(
        self, settings: Settings, db: Database
    ) -> None:
        now = datetime.now(UTC)
        async with db.session_scope() as session:
            repo = AdminSessionRepository(session)
            await repo.add(
                AdminSession("good", "admin@example.com", now, now + timedelta(hours=1))
            )
            await repo.add(
                AdminSession("old", "admin@example.com", now, now - timedelta(hours=1))
            )

        transport = ASGITransport(app=_app(settings, db))
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            good = await client.get("/admin", headers={"Authorization": "Bearer good"})
            expired = await client.get("/admin", headers={"Authorization": "Bearer old"})
            unknown = await client.get("/admin", headers={"Authorization": "Bearer nope"})

        assert good.json() == {"email": "admin@example.com"}
        assert expired.json() == {"email": None}
        assert unknown.json() == {"email": None}
