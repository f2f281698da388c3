"""SQLAlchemy ORM models for AlbumShelf."""

import uuid
from datetime import UTC, datetime

import sqlalchemy as sa
from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(UTC)


# Hey future me - SQLite doesn't preserve timezone info! Datetimes come back naive.
# Use this before comparing DB datetimes with datetime.now(UTC).
def ensure_utc_aware(dt: datetime) -> datetime:
    """Ensure datetime is UTC-aware, assuming naive datetimes are UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


# Hey future me, the two unique constraints ARE the dedup rules of the importer:
# link (the pasted URL) and the (title, artist) pair. The reconciler relies on the
# database raising IntegrityError on the pair to detect a concurrent import.
# NULL links never collide, so albums created without a link are fine.
class AlbumModel(Base):
    """SQLAlchemy model for Album entity."""

    __tablename__ = "albums"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    artist: Mapped[str] = mapped_column(String(255), nullable=False)
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    link: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    songs: Mapped[list["SongModel"]] = relationship(
        "SongModel",
        back_populates="album",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SongModel.title",
    )

    __table_args__ = (
        sa.UniqueConstraint("link", name="uq_albums_link"),
        sa.UniqueConstraint("title", "artist", name="uq_albums_title_artist"),
        Index("ix_albums_created_at", "created_at"),
    )


class SongModel(Base):
    """SQLAlchemy model for Song entity. No track-number column exists."""

    __tablename__ = "songs"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    link: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    album_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("albums.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=utc_now, nullable=False
    )

    album: Mapped["AlbumModel"] = relationship("AlbumModel", back_populates="songs")

    __table_args__ = (
        sa.UniqueConstraint("title", "album_id", name="uq_songs_title_album"),
        Index("ix_songs_album_id", "album_id"),
    )


class AdminSessionModel(Base):
    """Browser session of a signed-in admin.

    Rows are written by the identity provider (or scripts/issue_admin_session.py);
    the app only reads them. session_id is the cookie value.
    """

    __tablename__ = "admin_sessions"

    session_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=utc_now
    )
    expires_at: Mapped[datetime | None] = mapped_column(
        sa.DateTime(timezone=True), nullable=True
    )
    last_accessed_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=utc_now
    )

    __table_args__ = (Index("ix_admin_sessions_expires_at", "expires_at"),)
