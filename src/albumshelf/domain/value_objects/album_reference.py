"""Regex patterns that turn a pasted album URL into a provider reference.

Hey future me - this is the URL CLASSIFIER! Only two providers are supported:

1. APPLE MUSIC / ITUNES
   https://music.apple.com/us/album/folklore/1524809890
   https://music.apple.com/album/folklore/1524809890
   https://itunes.apple.com/us/album/folklore/id1524809890
   https://itunes.apple.com/lookup?id=1524809890&entity=song   (query-param fallback)
2. DEEZER
   https://www.deezer.com/album/302127
   https://www.deezer.com/en/album/302127

Apple is tried BEFORE Deezer and the first match wins. The `id=` fallback is
deliberately loose (any URL with an `id=<digits>` query param counts as iTunes),
which is how raw lookup URLs get through.

Usage:
    from albumshelf.domain.value_objects.album_reference import parse_album_url

    ref = parse_album_url("https://www.deezer.com/en/album/302127")
    ref.provider  # Provider.DEEZER
    ref.album_id  # "302127"
"""

import re

from albumshelf.domain.entities import ParsedReference, Provider
from albumshelf.domain.exceptions import UnsupportedUrlError

# =============================================================================
# REGEX PATTERNS
# =============================================================================

# apple.com/<optional storefront>/album/<slug>/<digits>, digits may carry a legacy "id" prefix
APPLE_ALBUM_PATH_PATTERN = re.compile(
    r"apple\.com/(?:[^/?#]+/)?album/[^/?#]+/(?:id)?(\d+)",
    re.IGNORECASE,
)

# ?id=<digits> or &id=<digits> anywhere in the string
APPLE_ID_QUERY_PATTERN = re.compile(r"[?&]id=(\d+)")

# deezer.com/<optional 2-letter locale>/album/<digits>
DEEZER_ALBUM_PATTERN = re.compile(
    r"deezer\.com/(?:[a-z]{2}/)?album/(\d+)",
    re.IGNORECASE,
)

# Order matters: Apple patterns first, then Deezer
_PATTERNS: tuple[tuple[re.Pattern[str], Provider], ...] = (
    (APPLE_ALBUM_PATH_PATTERN, Provider.ITUNES),
    (APPLE_ID_QUERY_PATTERN, Provider.ITUNES),
    (DEEZER_ALBUM_PATTERN, Provider.DEEZER),
)


def parse_album_url(url: str) -> ParsedReference:
    """Classify a pasted album URL.

    Args:
        url: Free-form string from the admin form

    Returns:
        ParsedReference with provider and provider-specific album id

    Raises:
        UnsupportedUrlError: Neither an Apple Music/iTunes nor a Deezer album URL
    """
    candidate = url.strip()
    for pattern, provider in _PATTERNS:
        match = pattern.search(candidate)
        if match:
            return ParsedReference(provider=provider, album_id=match.group(1))

    raise UnsupportedUrlError()
