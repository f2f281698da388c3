#!/usr/bin/env python3
"""Issue an admin session for the import page.

Hey future me - sign-in normally happens at the identity provider, which writes the
admin_sessions row. For local setups (or when the provider is down) this script writes
that row directly and prints the session id. Put it in a `session_id` cookie or send
`Authorization: Bearer <id>`.

Usage:
    python scripts/issue_admin_session.py admin@example.com
    python scripts/issue_admin_session.py admin@example.com --ttl-hours 2

Uses DATABASE__URL (or .env) like the app. Run `alembic upgrade head` first.
"""

import argparse
import asyncio
import secrets
from datetime import UTC, datetime, timedelta

from albumshelf.config import get_settings
from albumshelf.domain.entities import AdminSession
from albumshelf.infrastructure.persistence import AdminSessionRepository, Database


async def issue_session(email: str, ttl_hours: int | None) -> AdminSession:
    """Create and store a new admin session."""
    settings = get_settings()
    hours = ttl_hours or settings.auth.session_ttl_hours
    now = datetime.now(UTC)
    admin_session = AdminSession(
        session_id=secrets.token_urlsafe(32),
        email=email,
        created_at=now,
        expires_at=now + timedelta(hours=hours),
    )

    db = Database(settings)
    try:
        async with db.session_scope() as session:
            await AdminSessionRepository(session).add(admin_session)
    finally:
        await db.close()
    return admin_session


def main() -> None:
    parser = argparse.ArgumentParser(description="Issue an admin session id")
    parser.add_argument("email", help="Email the session belongs to")
    parser.add_argument("--ttl-hours", type=int, default=None, help="Session lifetime")
    args = parser.parse_args()

    admin_session = asyncio.run(issue_session(args.email, args.ttl_hours))
    print(admin_session.session_id)
    print(f"expires {admin_session.expires_at:%Y-%m-%d %H:%M} UTC")


if __name__ == "__main__":
    main()
