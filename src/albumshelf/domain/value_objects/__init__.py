"""Domain value objects."""

from albumshelf.domain.value_objects.album_reference import parse_album_url

__all__ = ["parse_album_url"]
