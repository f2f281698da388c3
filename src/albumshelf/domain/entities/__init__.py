"""Domain entities."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum


class Provider(str, Enum):
    """External metadata source an album URL points at."""

    ITUNES = "ITUNES"
    DEEZER = "DEEZER"

    @property
    def display_name(self) -> str:
        """Human-readable provider name for messages."""
        return "iTunes" if self is Provider.ITUNES else "Deezer"


@dataclass(frozen=True)
class ParsedReference:
    """Provider + provider-specific album id extracted from a pasted URL."""

    provider: Provider
    album_id: str


@dataclass(frozen=True)
class NormalizedSong:
    """Provider-agnostic track record produced by a fetcher."""

    title: str
    link: str | None = None


@dataclass
class NormalizedAlbum:
    """Provider-agnostic album shape produced by a fetcher.

    Songs keep the provider's order. Nothing here is persisted directly; the
    reconciler merges it into Album/Song rows.
    """

    title: str
    artist: str
    image_url: str | None = None
    songs: list[NormalizedSong] = field(default_factory=list)


@dataclass
class Song:
    """Song entity. Identity is scoped to its album: (title, album_id) is unique."""

    id: str
    title: str
    album_id: str
    link: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate song data."""
        if not self.title or not self.title.strip():
            raise ValueError("Song title cannot be empty")


@dataclass
class Album:
    """Album entity with its songs attached when loaded for display/API."""

    id: str
    title: str
    artist: str
    image_url: str | None = None
    # Hey future me - link is the URL the admin PASTED (not a canonical provider URL).
    # It is the first dedup key on re-import, so don't normalize it.
    link: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    songs: list[Song] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate album data."""
        if not self.title or not self.title.strip():
            raise ValueError("Album title cannot be empty")


@dataclass(frozen=True)
class AlbumSummary:
    """Read-side projection for the albums table: album + number of songs."""

    album: Album
    song_count: int


@dataclass
class AdminSession:
    """Authenticated browser session issued by the identity provider."""

    session_id: str
    email: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the session is past its expiry."""
        if self.expires_at is None:
            return False
        current = now or datetime.now(UTC)
        expires_at = self.expires_at
        # SQLite hands back naive datetimes; they are stored as UTC
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return current >= expires_at


__all__ = [
    "Provider",
    "ParsedReference",
    "NormalizedSong",
    "NormalizedAlbum",
    "Song",
    "Album",
    "AlbumSummary",
    "AdminSession",
]
