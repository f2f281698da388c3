"""Shared HTTP client pool for the metadata fetchers.

Hey future me - this is the CENTRAL httpx client! The iTunes and Deezer clients both
get their AsyncClient from here instead of creating their own, so connections are
reused and there is one cleanup point at shutdown (see lifecycle.py).

Usage:
    from albumshelf.infrastructure.integrations.http_pool import HttpClientPool

    client = await HttpClientPool.get_client(timeout=15.0, user_agent="AlbumShelf/0.1")
    response = await client.get("https://api.deezer.com/album/302127")

Don't forget HttpClientPool.close() at app shutdown!
"""

import asyncio
import logging
from typing import ClassVar

import httpx

logger = logging.getLogger(__name__)


class HttpClientPool:
    """Singleton HTTP client pool for connection reuse.

    - Lazy initialization (created on first use)
    - Guarded by an asyncio.Lock
    - Configurable timeout, limits and User-Agent on first call
    """

    _client: ClassVar[httpx.AsyncClient | None] = None
    _lock: ClassVar[asyncio.Lock | None] = None

    DEFAULT_TIMEOUT: ClassVar[float] = 15.0
    DEFAULT_MAX_KEEPALIVE: ClassVar[int] = 10
    DEFAULT_MAX_CONNECTIONS: ClassVar[int] = 20
    DEFAULT_USER_AGENT: ClassVar[str] = "AlbumShelf/0.1"

    @classmethod
    async def _ensure_lock(cls) -> asyncio.Lock:
        """Create the lock lazily, inside a running event loop."""
        if cls._lock is None:
            cls._lock = asyncio.Lock()
        return cls._lock

    @classmethod
    async def get_client(
        cls,
        timeout: float | None = None,
        user_agent: str | None = None,
        max_keepalive: int | None = None,
        max_connections: int | None = None,
    ) -> httpx.AsyncClient:
        """Get the shared HTTP client instance.

        Config params only apply on the FIRST call; later calls return the same client.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent to providers
            max_keepalive: Max idle connections to keep open
            max_connections: Max total concurrent connections

        Returns:
            Shared httpx.AsyncClient instance
        """
        lock = await cls._ensure_lock()

        async with lock:
            if cls._client is None:
                effective_timeout = timeout or cls.DEFAULT_TIMEOUT
                effective_keepalive = max_keepalive or cls.DEFAULT_MAX_KEEPALIVE
                effective_max_conn = max_connections or cls.DEFAULT_MAX_CONNECTIONS

                cls._client = httpx.AsyncClient(
                    timeout=httpx.Timeout(effective_timeout),
                    limits=httpx.Limits(
                        max_keepalive_connections=effective_keepalive,
                        max_connections=effective_max_conn,
                    ),
                    headers={
                        "User-Agent": user_agent or cls.DEFAULT_USER_AGENT,
                        "Accept": "application/json",
                    },
                    http2=True,
                    follow_redirects=True,
                )
                logger.info(
                    "HTTP client pool initialized (timeout=%.1fs, keepalive=%d, max_conn=%d)",
                    effective_timeout,
                    effective_keepalive,
                    effective_max_conn,
                )

            return cls._client

    @classmethod
    async def close(cls) -> None:
        """Close the shared HTTP client and release all connections.

        After close(), get_client() creates a new client instance.
        """
        lock = await cls._ensure_lock()

        async with lock:
            if cls._client is not None:
                await cls._client.aclose()
                cls._client = None
                logger.info("HTTP client pool closed")

    @classmethod
    def is_initialized(cls) -> bool:
        """Check if the client pool has been initialized."""
        return cls._client is not None
