"""SQLAlchemy repository implementations."""

from datetime import UTC, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from albumshelf.domain.entities import AdminSession, Album, AlbumSummary, Song
from albumshelf.domain.exceptions import EntityNotFoundException
from albumshelf.domain.ports import (
    IAdminSessionRepository,
    IAlbumRepository,
    ISongRepository,
)
from albumshelf.infrastructure.persistence.models import (
    AdminSessionModel,
    AlbumModel,
    SongModel,
    ensure_utc_aware,
)


class AlbumRepository(IAlbumRepository):
    """SQLAlchemy implementation of Album repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    # Hey future me - this is the ONE place that maps DB → Entity!
    # Songs are only mapped when the caller eager-loaded them (with_songs=True),
    # touching model.songs otherwise triggers a lazy load, which async sessions forbid.
    def _model_to_entity(self, model: AlbumModel, with_songs: bool = False) -> Album:
        """Convert AlbumModel to Album entity."""
        return Album(
            id=model.id,
            title=model.title,
            artist=model.artist,
            image_url=model.image_url,
            link=model.link,
            created_at=ensure_utc_aware(model.created_at),
            updated_at=ensure_utc_aware(model.updated_at),
            songs=[SongRepository.model_to_entity(s) for s in model.songs]
            if with_songs
            else [],
        )

    async def add(self, album: Album) -> None:
        """Add a new album."""
        model = AlbumModel(
            id=album.id,
            title=album.title,
            artist=album.artist,
            image_url=album.image_url,
            link=album.link,
            created_at=album.created_at,
            updated_at=album.updated_at,
        )
        self.session.add(model)

    async def update(self, album: Album) -> None:
        """Update an existing album."""
        stmt = select(AlbumModel).where(AlbumModel.id == album.id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            raise EntityNotFoundException("Album", album.id)

        model.title = album.title
        model.artist = album.artist
        model.image_url = album.image_url
        model.link = album.link
        model.updated_at = datetime.now(UTC)

    async def get_by_link(self, link: str) -> Album | None:
        """Get an album by the URL it was imported from."""
        stmt = select(AlbumModel).where(AlbumModel.link == link)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        return self._model_to_entity(model)

    # Exact match on purpose: the unique constraint is case-sensitive, so a
    # case-insensitive lookup could find a row the insert would not collide with.
    async def get_by_title_and_artist(self, title: str, artist: str) -> Album | None:
        """Get an album by title and artist."""
        stmt = select(AlbumModel).where(
            AlbumModel.title == title,
            AlbumModel.artist == artist,
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        return self._model_to_entity(model)

    async def get_with_songs(self, album_id: str) -> Album | None:
        """Get an album with songs ordered alphabetically by title."""
        stmt = (
            select(AlbumModel)
            .where(AlbumModel.id == album_id)
            .options(selectinload(AlbumModel.songs))
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        return self._model_to_entity(model, with_songs=True)

    async def list_with_song_counts(self, limit: int | None = None) -> list[AlbumSummary]:
        """List albums ordered by creation time (newest first) with song counts.

        Uses a single grouped query instead of loading every song.
        """
        song_count = func.count(SongModel.id).label("song_count")
        stmt = (
            select(AlbumModel, song_count)
            .outerjoin(SongModel, SongModel.album_id == AlbumModel.id)
            .group_by(AlbumModel.id)
            .order_by(AlbumModel.created_at.desc(), AlbumModel.id)
        )
        if limit:
            stmt = stmt.limit(limit)

        result = await self.session.execute(stmt)
        return [
            AlbumSummary(album=self._model_to_entity(model), song_count=count)
            for model, count in result.all()
        ]


class SongRepository(ISongRepository):
    """SQLAlchemy implementation of Song repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    @staticmethod
    def model_to_entity(model: SongModel) -> Song:
        """Convert SongModel to Song entity."""
        return Song(
            id=model.id,
            title=model.title,
            album_id=model.album_id,
            link=model.link,
            created_at=ensure_utc_aware(model.created_at),
        )

    async def add(self, song: Song) -> None:
        """Add a new song."""
        model = SongModel(
            id=song.id,
            title=song.title,
            link=song.link,
            album_id=song.album_id,
            created_at=song.created_at,
        )
        self.session.add(model)

    async def update(self, song: Song) -> None:
        """Update an existing song."""
        stmt = select(SongModel).where(SongModel.id == song.id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            raise EntityNotFoundException("Song", song.id)

        model.title = song.title
        model.link = song.link

    async def get_by_title_and_album(self, title: str, album_id: str) -> Song | None:
        """Get a song by title within one album."""
        stmt = select(SongModel).where(
            SongModel.title == title,
            SongModel.album_id == album_id,
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        return self.model_to_entity(model)


class AdminSessionRepository(IAdminSessionRepository):
    """SQLAlchemy implementation of the admin session store."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with session."""
        self.session = session

    async def add(self, session: AdminSession) -> None:
        """Store a new admin session."""
        model = AdminSessionModel(
            session_id=session.session_id,
            email=session.email,
            created_at=session.created_at,
            expires_at=session.expires_at,
            last_accessed_at=session.created_at,
        )
        self.session.add(model)

    async def get(self, session_id: str) -> AdminSession | None:
        """Get a session by id and update its last-accessed timestamp."""
        stmt = select(AdminSessionModel).where(
            AdminSessionModel.session_id == session_id
        )
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return None

        model.last_accessed_at = datetime.now(UTC)
        return AdminSession(
            session_id=model.session_id,
            email=model.email,
            created_at=ensure_utc_aware(model.created_at),
            expires_at=ensure_utc_aware(model.expires_at) if model.expires_at else None,
        )
