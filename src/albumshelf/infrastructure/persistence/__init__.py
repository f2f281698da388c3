"""Infrastructure persistence layer."""

from .database import Database
from .models import AdminSessionModel, AlbumModel, Base, SongModel
from .repositories import AdminSessionRepository, AlbumRepository, SongRepository

__all__ = [
    # Database
    "Database",
    "Base",
    # Models
    "AlbumModel",
    "SongModel",
    "AdminSessionModel",
    # Repositories
    "AlbumRepository",
    "SongRepository",
    "AdminSessionRepository",
]
