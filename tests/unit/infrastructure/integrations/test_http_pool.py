"""Tests for the shared HTTP client pool."""

import pytest
from pytest_httpx import HTTPXMock

from albumshelf.infrastructure.integrations.http_pool import HttpClientPool


@pytest.fixture(autouse=True)
async def reset_pool():
    await HttpClientPool.close()
    yield
    await HttpClientPool.close()


class TestHttpClientPool:
    async def test_get_client_returns_same_instance(self):
        assert not HttpClientPool.is_initialized()

        first = await HttpClientPool.get_client(timeout=5.0)
        second = await HttpClientPool.get_client(timeout=30.0)

        assert first is second
        assert HttpClientPool.is_initialized()

    async def test_first_call_configures_client(self):
        client = await HttpClientPool.get_client(
            timeout=7.5, user_agent="AlbumShelf-Test/1.0"
        )

        assert client.timeout.read == 7.5
        assert client.headers["User-Agent"] == "AlbumShelf-Test/1.0"
        assert client.headers["Accept"] == "application/json"

    async def test_close_resets_pool(self):
        first = await HttpClientPool.get_client()
        await HttpClientPool.close()

        assert not HttpClientPool.is_initialized()
        assert first.is_closed

        second = await HttpClientPool.get_client()
        assert second is not first

    async def test_requests_carry_pool_headers(self, httpx_mock: HTTPXMock):
        httpx_mock.add_response(
            url="https://api.deezer.com/album/302127", json={"id": 302127}
        )

        client = await HttpClientPool.get_client(user_agent="AlbumShelf-Test/1.0")
        response = await client.get("https://api.deezer.com/album/302127")

        assert response.json() == {"id": 302127}
        request = httpx_mock.get_request()
        assert request.headers["User-Agent"] == "AlbumShelf-Test/1.0"
