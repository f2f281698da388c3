"""Album Reconciler Service.

Hey future me - THIS IS WHERE FETCHED METADATA BECOMES ROWS!

Input: the URL the admin pasted + a NormalizedAlbum from a fetcher.
Output: the stored Album with its songs (ordered by title).

Matching order for the album:
    1. link == pasted URL    → same import again, refresh title/artist/image
    2. (title, artist) pair  → same album pasted from another URL, take over link/image
    3. nothing               → insert a new row

Songs are matched by (title, album id). Re-importing the same URL any number of
times leaves exactly one album and one song per distinct title.

Two database guarantees this relies on:
- uq_albums_title_artist: a concurrent import of the same album loses the insert
  race with IntegrityError. We catch THAT one case inside a SAVEPOINT, re-query
  the pair and update the winner's row instead.
- The song batch runs in its own SAVEPOINT, so a failure halfway through the
  track list leaves no songs from this batch behind.

reconcile() commits the session itself before returning, so the caller never
reports an import that was not persisted.

Usage:
    reconciler = AlbumReconciler(session, AlbumRepository(session), SongRepository(session))
    album = await reconciler.reconcile(url, normalized)
"""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from albumshelf.domain.entities import Album, NormalizedAlbum, NormalizedSong, Song
from albumshelf.domain.exceptions import ReconcileError
from albumshelf.domain.ports import IAlbumRepository, ISongRepository

logger = logging.getLogger(__name__)


class AlbumReconciler:
    """Upserts a fetched album and its songs into storage."""

    def __init__(
        self,
        session: AsyncSession,
        album_repository: IAlbumRepository,
        song_repository: ISongRepository,
    ) -> None:
        """Initialize reconciler.

        Args:
            session: Session the repositories write through (used for savepoints)
            album_repository: Album storage
            song_repository: Song storage
        """
        self._session = session
        self._albums = album_repository
        self._songs = song_repository

    async def reconcile(self, original_url: str, data: NormalizedAlbum) -> Album:
        """Merge fetched album data into storage and return the stored album.

        Args:
            original_url: URL exactly as the admin pasted it
            data: Normalized album from a fetcher

        Returns:
            Stored album with songs ordered by title

        Raises:
            ReconcileError: Any storage failure except the handled insert race
        """
        try:
            album = await self._albums.get_by_link(original_url)
            if album is not None:
                await self._refresh_album(album, data)
            else:
                album = await self._upsert_by_title_and_artist(original_url, data)
        except ReconcileError:
            raise
        except SQLAlchemyError as e:
            logger.error("Album upsert failed for %s: %s", original_url, e)
            raise ReconcileError(f"Failed to save album: {e}") from e

        await self._upsert_songs(album.id, data.songs)
        await self._commit(original_url)

        try:
            stored = await self._albums.get_with_songs(album.id)
        except SQLAlchemyError as e:
            raise ReconcileError(f"Failed to load album: {e}") from e
        if stored is None:
            raise ReconcileError(f"Album {album.id} vanished during import")

        logger.info(
            "Reconciled album '%s' by %s (%d songs) from %s",
            stored.title,
            stored.artist,
            len(stored.songs),
            original_url,
        )
        return stored

    async def _refresh_album(self, album: Album, data: NormalizedAlbum) -> None:
        """Same URL imported again: refresh metadata in place."""
        album.title = data.title
        album.artist = data.artist
        if data.image_url is not None:
            album.image_url = data.image_url
        await self._albums.update(album)
        await self._session.flush()
        logger.debug("Refreshed album %s from existing link", album.id)

    async def _upsert_by_title_and_artist(
        self, original_url: str, data: NormalizedAlbum
    ) -> Album:
        """Find or create the album by its (title, artist) pair."""
        try:
            async with self._session.begin_nested():
                existing = await self._albums.get_by_title_and_artist(
                    data.title, data.artist
                )
                if existing is not None:
                    album = self._take_over(existing, original_url, data)
                    await self._albums.update(album)
                else:
                    now = datetime.now(UTC)
                    album = Album(
                        id=str(uuid4()),
                        title=data.title,
                        artist=data.artist,
                        image_url=data.image_url,
                        link=original_url,
                        created_at=now,
                        updated_at=now,
                    )
                    await self._albums.add(album)
                await self._session.flush()
            return album
        except IntegrityError as e:
            # Someone inserted the same pair between our lookup and our insert
            winner = await self._albums.get_by_title_and_artist(data.title, data.artist)
            if winner is None:
                raise ReconcileError(f"Failed to save album: {e.orig}") from e
            logger.warning(
                "Album '%s' by %s was created concurrently, updating row %s instead",
                data.title,
                data.artist,
                winner.id,
            )
            album = self._take_over(winner, original_url, data)
            await self._albums.update(album)
            await self._session.flush()
            return album

    # Hey future me - the request session would commit on its own after the endpoint
    # returns, but by then the 200 is already on the wire. Committing here turns a
    # lost write ("database is locked", deferred constraints) into a 500.
    async def _commit(self, original_url: str) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            logger.error("Commit failed for import of %s: %s", original_url, e)
            raise ReconcileError(f"Failed to save album: {e}") from e

    @staticmethod
    def _take_over(album: Album, original_url: str, data: NormalizedAlbum) -> Album:
        album.link = original_url
        if data.image_url is not None:
            album.image_url = data.image_url
        return album

    async def _upsert_songs(self, album_id: str, songs: list[NormalizedSong]) -> None:
        """Upsert the whole track list as one all-or-nothing batch."""
        created = updated = 0
        try:
            async with self._session.begin_nested():
                for item in songs:
                    existing = await self._songs.get_by_title_and_album(
                        item.title, album_id
                    )
                    if existing is not None:
                        if item.link is not None and item.link != existing.link:
                            existing.link = item.link
                            await self._songs.update(existing)
                            updated += 1
                        continue
                    await self._songs.add(
                        Song(
                            id=str(uuid4()),
                            title=item.title,
                            album_id=album_id,
                            link=item.link,
                        )
                    )
                    # Flush per song so a repeated title in one track list hits the row above
                    await self._session.flush()
                    created += 1
        except Exception as e:
            logger.error(
                "Song batch for album %s rolled back after %d inserts: %s",
                album_id,
                created,
                e,
            )
            raise ReconcileError(f"Failed to save songs: {e}") from e

        logger.debug(
            "Songs for album %s: %d created, %d updated", album_id, created, updated
        )
