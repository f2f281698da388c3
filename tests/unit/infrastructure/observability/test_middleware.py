"""Unit tests for RequestLoggingMiddleware."""

from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from starlette.middleware.base import BaseHTTPMiddleware

from albumshelf.infrastructure.observability.middleware import RequestLoggingMiddleware


class TestRequestLoggingMiddleware:
    """Test suite for RequestLoggingMiddleware."""

    @pytest.fixture
    def app(self) -> FastAPI:
        """Create a FastAPI app with middleware for testing."""
        app = FastAPI()
        app.add_middleware(RequestLoggingMiddleware, log_request_body=False)

        @app.get("/test")
        async def test_endpoint():
            return {"message": "test"}

        @app.get("/error")
        async def error_endpoint():
            raise ValueError("Test error")

        return app

    @pytest.fixture
    def client(self, app: FastAPI) -> TestClient:
        """Create a test client."""
        return TestClient(app, raise_server_exceptions=False)

    def test_middleware_initialization_default(self):
        """Test middleware initialization with default parameters."""
        middleware = RequestLoggingMiddleware(app=FastAPI())

        assert middleware.log_request_body is False
        assert isinstance(middleware, BaseHTTPMiddleware)

    def test_correlation_id_is_echoed(self, client: TestClient):
        """An incoming X-Correlation-ID is reused on the response."""
        response = client.get("/test", headers={"X-Correlation-ID": "corr-42"})

        assert response.status_code == 200
        assert response.headers["X-Correlation-ID"] == "corr-42"

    def test_correlation_id_is_generated(self, client: TestClient):
        """Requests without the header still get one."""
        response = client.get("/test")

        assert len(response.headers["X-Correlation-ID"]) == 36

    def test_successful_request_logs_start_and_completion(self, client: TestClient):
        """Two info lines: arrow in, check mark out."""
        with patch(
            "albumshelf.infrastructure.observability.middleware.logger"
        ) as mock_logger:
            client.get("/test")

        messages = [call.args[0] for call in mock_logger.info.call_args_list]
        assert messages[0] == "→ GET /test"
        assert messages[1].startswith("✓ GET /test → 200 (")

    def test_failing_request_is_logged_and_reraised(self, client: TestClient):
        """Unhandled errors are logged with the exception and become a 500."""
        with patch(
            "albumshelf.infrastructure.observability.middleware.logger"
        ) as mock_logger:
            response = client.get("/error")

        assert response.status_code == 500
        mock_logger.exception.assert_called_once()
        assert mock_logger.exception.call_args.args[0] == "Request failed: GET /error"
