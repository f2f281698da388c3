"""Tests for album URL classification."""

import pytest

from albumshelf.domain.entities import ParsedReference, Provider
from albumshelf.domain.exceptions import UNSUPPORTED_URL_HINT, UnsupportedUrlError
from albumshelf.domain.value_objects import parse_album_url


class TestAppleUrls:
    """Apple Music / iTunes URL shapes."""

    @pytest.mark.parametrize(
        ("url", "album_id"),
        [
            ("https://music.apple.com/us/album/folklore/1524801260", "1524801260"),
            ("https://music.apple.com/album/folklore/1524801260", "1524801260"),
            ("https://itunes.apple.com/gb/album/folklore/id1524801260", "1524801260"),
            (
                "https://music.apple.com/us/album/folklore/1524801260?i=1524801263",
                "1524801260",
            ),
            ("https://itunes.apple.com/lookup?id=1440857781&entity=song", "1440857781"),
            ("https://music.apple.com/us/album?foo=bar&id=42", "42"),
        ],
    )
    def test_recognizes_apple_album(self, url: str, album_id: str) -> None:
        """Path form, legacy id prefix and id= query parameter all resolve."""
        assert parse_album_url(url) == ParsedReference(Provider.ITUNES, album_id)

    def test_surrounding_whitespace_is_ignored(self) -> None:
        """Pasted values often carry a trailing newline."""
        ref = parse_album_url("  https://music.apple.com/us/album/x/123\n")
        assert ref.album_id == "123"

    def test_apple_wins_over_deezer(self) -> None:
        """Apple patterns are checked first."""
        ref = parse_album_url(
            "https://music.apple.com/us/album/x/111?ref=https://www.deezer.com/album/222"
        )
        assert ref == ParsedReference(Provider.ITUNES, "111")


class TestDeezerUrls:
    """Deezer URL shapes."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.deezer.com/album/302127",
            "https://www.deezer.com/en/album/302127",
            "https://deezer.com/fr/album/302127?utm_source=x",
        ],
    )
    def test_recognizes_deezer_album(self, url: str) -> None:
        """With and without a locale segment."""
        assert parse_album_url(url) == ParsedReference(Provider.DEEZER, "302127")

    def test_deezer_track_url_is_not_an_album(self) -> None:
        """Only /album/ paths count."""
        with pytest.raises(UnsupportedUrlError):
            parse_album_url("https://www.deezer.com/track/3135556")


class TestUnsupportedUrls:
    """Anything else is rejected with the user-facing hint."""

    @pytest.mark.parametrize(
        "url",
        [
            "not a url",
            "",
            "https://open.spotify.com/album/4aawyAB9vmqN3uQ7FjRGTy",
            "https://music.apple.com/us/artist/taylor-swift/159260351",
        ],
    )
    def test_raises_with_hint(self, url: str) -> None:
        """Message tells the admin which URLs work."""
        with pytest.raises(UnsupportedUrlError) as exc_info:
            parse_album_url(url)
        assert exc_info.value.message == UNSUPPORTED_URL_HINT
