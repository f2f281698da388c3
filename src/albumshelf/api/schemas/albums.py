"""API schemas for album import and listing."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from albumshelf.domain.entities import Album, AlbumSummary, Song


class ImportAlbumPayload(BaseModel):
    """Body of POST /api/albums/import.

    url is optional here on purpose so a missing url becomes our 400
    {"error": ...} instead of FastAPI's 422.
    """

    model_config = ConfigDict(extra="ignore")

    url: str | None = Field(default=None, description="Apple Music or Deezer album URL")


class SongResponse(BaseModel):
    """Song as returned by the API."""

    id: str
    title: str
    link: str | None = None
    album_id: str

    @classmethod
    def from_entity(cls, song: Song) -> "SongResponse":
        return cls(id=song.id, title=song.title, link=song.link, album_id=song.album_id)


class AlbumResponse(BaseModel):
    """Album with its songs (ordered by title)."""

    id: str
    title: str
    artist: str
    image_url: str | None = None
    link: str | None = None
    created_at: datetime
    updated_at: datetime
    songs: list[SongResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, album: Album) -> "AlbumResponse":
        return cls(
            id=album.id,
            title=album.title,
            artist=album.artist,
            image_url=album.image_url,
            link=album.link,
            created_at=album.created_at,
            updated_at=album.updated_at,
            songs=[SongResponse.from_entity(s) for s in album.songs],
        )


class ImportAlbumResponse(BaseModel):
    """Successful import."""

    album: AlbumResponse


class AlbumSummaryResponse(BaseModel):
    """One row of the albums table."""

    id: str
    title: str
    artist: str
    image_url: str | None = None
    link: str | None = None
    created_at: datetime
    song_count: int

    @classmethod
    def from_summary(cls, summary: AlbumSummary) -> "AlbumSummaryResponse":
        album = summary.album
        return cls(
            id=album.id,
            title=album.title,
            artist=album.artist,
            image_url=album.image_url,
            link=album.link,
            created_at=album.created_at,
            song_count=summary.song_count,
        )


class AlbumListResponse(BaseModel):
    """GET /api/albums response."""

    albums: list[AlbumSummaryResponse]
    total: int
