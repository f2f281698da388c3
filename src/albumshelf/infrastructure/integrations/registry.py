"""Album metadata fetcher registry.

Maps each Provider to the fetcher that handles it. Fetchers are registered at
startup (see build_fetcher_registry) and looked up per import request.
"""

import logging

import httpx

from albumshelf.config import Settings
from albumshelf.domain.entities import Provider
from albumshelf.domain.exceptions import ConfigurationError
from albumshelf.domain.ports import IAlbumMetadataFetcher
from albumshelf.infrastructure.integrations.deezer_client import DeezerClient
from albumshelf.infrastructure.integrations.itunes_client import ItunesClient

logger = logging.getLogger(__name__)


class FetcherRegistry:
    """Registry for album metadata fetcher implementations."""

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._fetchers: dict[Provider, IAlbumMetadataFetcher] = {}

    def register(self, fetcher: IAlbumMetadataFetcher) -> None:
        """Register a fetcher under its provider, replacing any previous one.

        Args:
            fetcher: Fetcher implementation to register
        """
        self._fetchers[fetcher.provider] = fetcher
        logger.info("Registered metadata fetcher: %s", fetcher.provider.display_name)

    def providers(self) -> list[Provider]:
        """Get all providers that have a fetcher."""
        return list(self._fetchers)

    def get(self, provider: Provider) -> IAlbumMetadataFetcher:
        """Get the fetcher for a provider.

        Raises:
            ConfigurationError: No fetcher registered for this provider
        """
        fetcher = self._fetchers.get(provider)
        if fetcher is None:
            raise ConfigurationError(
                f"No metadata fetcher registered for {provider.display_name}"
            )
        return fetcher


def build_fetcher_registry(client: httpx.AsyncClient, settings: Settings) -> FetcherRegistry:
    """Create a registry with the iTunes and Deezer fetchers sharing one client."""
    registry = FetcherRegistry()
    registry.register(ItunesClient(client, base_url=settings.providers.itunes_base_url))
    registry.register(DeezerClient(client, base_url=settings.providers.deezer_base_url))
    return registry
