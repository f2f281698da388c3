"""AlbumShelf - import Apple Music and Deezer albums into a small library."""

__version__ = "0.1.0"
