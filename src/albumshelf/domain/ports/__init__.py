"""Domain ports (interfaces) for dependency inversion."""

from abc import ABC, abstractmethod

from albumshelf.domain.entities import (
    AdminSession,
    Album,
    AlbumSummary,
    NormalizedAlbum,
    Provider,
    Song,
)


class IAlbumRepository(ABC):
    """Repository interface for Album entities."""

    @abstractmethod
    async def add(self, album: Album) -> None:
        """Add a new album."""
        pass

    @abstractmethod
    async def update(self, album: Album) -> None:
        """Update an existing album by id."""
        pass

    @abstractmethod
    async def get_by_link(self, link: str) -> Album | None:
        """Get the album imported from exactly this URL."""
        pass

    @abstractmethod
    async def get_by_title_and_artist(self, title: str, artist: str) -> Album | None:
        """Get an album by its (title, artist) pair."""
        pass

    @abstractmethod
    async def get_with_songs(self, album_id: str) -> Album | None:
        """Get an album with its songs ordered by title."""
        pass

    @abstractmethod
    async def list_with_song_counts(self, limit: int | None = None) -> list[AlbumSummary]:
        """List albums, newest first, with their song counts."""
        pass


class ISongRepository(ABC):
    """Repository interface for Song entities."""

    @abstractmethod
    async def add(self, song: Song) -> None:
        """Add a new song."""
        pass

    @abstractmethod
    async def update(self, song: Song) -> None:
        """Update an existing song by id."""
        pass

    @abstractmethod
    async def get_by_title_and_album(self, title: str, album_id: str) -> Song | None:
        """Get a song by its (title, album_id) pair."""
        pass


class IAdminSessionRepository(ABC):
    """Repository interface for admin sessions written by the identity provider."""

    @abstractmethod
    async def add(self, session: AdminSession) -> None:
        """Store a new session."""
        pass

    @abstractmethod
    async def get(self, session_id: str) -> AdminSession | None:
        """Get a session by id and bump its last-accessed timestamp."""
        pass


class IAlbumMetadataFetcher(ABC):
    """Fetches one album from a provider and normalizes it.

    Implementations raise UpstreamFetchError on non-success HTTP responses and
    AlbumNotFoundError when the payload has no usable album.
    """

    provider: Provider

    @abstractmethod
    async def fetch(self, album_id: str) -> NormalizedAlbum:
        """Fetch and normalize the album with this provider-specific id."""
        pass


__all__ = [
    "IAlbumRepository",
    "ISongRepository",
    "IAdminSessionRepository",
    "IAlbumMetadataFetcher",
]
