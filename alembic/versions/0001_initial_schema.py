"""initial schema: albums, songs, admin_sessions

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 12:00:00.000000

Hey future me - the unique constraints here ARE the importer's dedup rules:
- uq_albums_link: one album per pasted URL
- uq_albums_title_artist: one album per (title, artist); the reconciler catches
  the IntegrityError from this one when two imports race
- uq_songs_title_album: one song per title within an album
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "albums",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("artist", sa.String(255), nullable=False),
        sa.Column("image_url", sa.String(1024), nullable=True),
        sa.Column("link", sa.String(1024), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("link", name="uq_albums_link"),
        sa.UniqueConstraint("title", "artist", name="uq_albums_title_artist"),
    )
    op.create_index("ix_albums_created_at", "albums", ["created_at"])

    op.create_table(
        "songs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("link", sa.String(1024), nullable=True),
        sa.Column(
            "album_id",
            sa.String(36),
            sa.ForeignKey("albums.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("title", "album_id", name="uq_songs_title_album"),
    )
    op.create_index("ix_songs_album_id", "songs", ["album_id"])

    op.create_table(
        "admin_sessions",
        sa.Column("session_id", sa.String(64), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_accessed_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_admin_sessions_expires_at", "admin_sessions", ["expires_at"])


def downgrade() -> None:
    op.drop_index("ix_admin_sessions_expires_at", table_name="admin_sessions")
    op.drop_table("admin_sessions")
    op.drop_index("ix_songs_album_id", table_name="songs")
    op.drop_table("songs")
    op.drop_index("ix_albums_created_at", table_name="albums")
    op.drop_table("albums")
