"""
Unit tests for server exception handlers.

Tests cover the global 500 handler, the 409 handler for integrity errors
and their registration on the application.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import FastAPI, Request
from sqlalchemy.exc import IntegrityError

from placemaker_ai.server.exception_handlers import setup_exception_handlers
from placemaker_ai.server.exception_handlers.global_handler import (
    global_exception_handler,
    integrity_error_handler,
)


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "POST"
    request.url.path = "/api/v1/projects"
    request.query_params = {"page": "1"}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    return request


@pytest.mark.asyncio
class TestGlobalExceptionHandler:
    """Test suite for global exception handler."""

    async def test_logs_error_with_context(self, mock_request):
        exc = ValueError("Test error")

        with patch("placemaker_ai.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, exc)

        mock_logger.error.assert_called_once()
        call_args = mock_logger.error.call_args
        assert "Unhandled exception" in call_args[0][0]
        extra = call_args[1]["extra"]
        assert extra["error_type"] == "ValueError"
        assert extra["path"] == "/api/v1/projects"
        assert extra["query_params"] == {"page": "1"}
        assert extra["client"] == "127.0.0.1"

    async def test_returns_500_with_error_id(self, mock_request):
        with patch("placemaker_ai.server.exception_handlers.global_handler.logger"):
            response = await global_exception_handler(mock_request, RuntimeError("boom"))

        assert response.status_code == 500
        body = json.loads(response.body)
        assert body["detail"] == "Internal server error"
        assert body["error_type"] == "RuntimeError"
        assert len(body["error_id"]) == 12

    async def test_missing_client(self, mock_request):
        mock_request.client = None
        with patch("placemaker_ai.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, KeyError("k"))
        assert mock_logger.error.call_args[1]["extra"]["client"] == "unknown"


@pytest.mark.asyncio
class TestIntegrityErrorHandler:
    """Test suite for the integrity error handler."""

    async def test_returns_409(self, mock_request):
        exc = IntegrityError("INSERT INTO councils", {}, Exception("UNIQUE constraint failed: councils.name"))

        with patch("placemaker_ai.server.exception_handlers.global_handler.logger") as mock_logger:
            response = await integrity_error_handler(mock_request, exc)

        assert response.status_code == 409
        body = json.loads(response.body)
        assert body["detail"] == "Conflicts with existing data"
        assert body["error_type"] == "IntegrityError"
        assert "UNIQUE constraint failed" in mock_logger.warning.call_args[0][0]


class TestSetupExceptionHandlers:
    def test_registers_handlers(self):
        app = FastAPI()
        setup_exception_handlers(app)
        assert app.exception_handlers[Exception] is global_exception_handler
        assert app.exception_handlers[IntegrityError] is integrity_error_handler
