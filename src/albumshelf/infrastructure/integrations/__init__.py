"""External metadata provider integrations."""

from albumshelf.infrastructure.integrations.deezer_client import DeezerClient
from albumshelf.infrastructure.integrations.http_pool import HttpClientPool
from albumshelf.infrastructure.integrations.itunes_client import ItunesClient
from albumshelf.infrastructure.integrations.registry import (
    FetcherRegistry,
    build_fetcher_registry,
)

__all__ = [
    "DeezerClient",
    "FetcherRegistry",
    "HttpClientPool",
    "ItunesClient",
    "build_fetcher_registry",
]
