"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Environment variable parsing
- Logfire initialization with various configurations
- Structured event helpers (API requests, analysis runs, external lookups)
- Graceful degradation when Logfire is unavailable
"""

import importlib
import os
from unittest.mock import Mock, patch

import pytest

import placemaker_ai.core.monitoring as monitoring_module
from placemaker_ai.core.monitoring import (
    initialize_logfire,
    log_analysis_run,
    log_api_request,
    log_external_lookup,
)


@pytest.fixture
def reload_monitoring():
    """Reload the module under a patched environment, then restore it."""
    yield lambda: importlib.reload(monitoring_module)
    importlib.reload(monitoring_module)


class TestLogfireEnvironmentConfiguration:
    """Test environment variable configuration for Logfire."""

    def test_disabled_by_default(self, reload_monitoring):
        with patch.dict(os.environ, {}, clear=True):
            module = reload_monitoring()

            assert module.LOGFIRE_ENABLED is False
            assert module.LOGFIRE_PROJECT_NAME == "placemaker-ai"
            assert module.LOGFIRE_SERVICE_NAME == "placemaker-ai-server"
            assert module.LOGFIRE_TRACE_FASTAPI is True

    @pytest.mark.parametrize("value", ["true", "1", "yes", "TRUE"])
    def test_enabled_values(self, reload_monitoring, value):
        with patch.dict(os.environ, {"LOGFIRE_ENABLED": value}):
            assert reload_monitoring().LOGFIRE_ENABLED is True

    def test_values_from_environment(self, reload_monitoring):
        env = {
            "LOGFIRE_TOKEN": "tok",
            "LOGFIRE_ENVIRONMENT": "staging",
            "LOGFIRE_SAMPLE_RATE": "0.25",
            "LOGFIRE_TRACE_SQLALCHEMY": "false",
        }
        with patch.dict(os.environ, env):
            module = reload_monitoring()

            assert module.LOGFIRE_TOKEN == "tok"
            assert module.LOGFIRE_ENVIRONMENT == "staging"
            assert module.LOGFIRE_SAMPLE_RATE == 0.25
            assert module.LOGFIRE_TRACE_SQLALCHEMY is False


class TestInitializeLogfire:
    """Test initialize_logfire function."""

    @patch("placemaker_ai.core.monitoring.LOGFIRE_ENABLED", False)
    @patch("placemaker_ai.core.monitoring.logfire")
    @patch("placemaker_ai.core.monitoring.logger")
    def test_disabled(self, mock_logger, mock_logfire):
        initialize_logfire()

        mock_logfire.configure.assert_not_called()
        assert "disabled" in mock_logger.info.call_args[0][0]

    @patch("placemaker_ai.core.monitoring.LOGFIRE_ENABLED", True)
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TOKEN", "")
    @patch("placemaker_ai.core.monitoring.logfire")
    @patch("placemaker_ai.core.monitoring.logger")
    def test_no_token(self, mock_logger, mock_logfire):
        initialize_logfire()

        mock_logfire.configure.assert_not_called()
        assert "LOGFIRE_TOKEN is not set" in mock_logger.warning.call_args[0][0]

    @patch("placemaker_ai.core.monitoring.LOGFIRE_ENABLED", True)
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TOKEN", "test-token")
    @patch("placemaker_ai.core.monitoring.LOGFIRE_SERVICE_NAME", "test-service")
    @patch("placemaker_ai.core.monitoring.LOGFIRE_SERVICE_VERSION", "1.0.0")
    @patch("placemaker_ai.core.monitoring.LOGFIRE_ENVIRONMENT", "test")
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TRACE_PYDANTIC_AI", True)
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TRACE_SQLALCHEMY", True)
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TRACE_HTTPX", True)
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TRACE_FASTAPI", True)
    @patch("placemaker_ai.core.monitoring.logfire")
    @patch("placemaker_ai.core.monitoring.logger")
    def test_configures_and_instruments(self, mock_logger, mock_logfire):
        app = Mock()

        initialize_logfire(app)

        kwargs = mock_logfire.configure.call_args.kwargs
        assert kwargs["token"] == "test-token"
        assert kwargs["service_name"] == "test-service"
        assert kwargs["service_version"] == "1.0.0"
        assert kwargs["environment"] == "test"
        mock_logfire.instrument_pydantic_ai.assert_called_once()
        mock_logfire.instrument_sqlalchemy.assert_called_once()
        mock_logfire.instrument_httpx.assert_called_once()
        mock_logfire.instrument_fastapi.assert_called_once_with(app=app)

    @patch("placemaker_ai.core.monitoring.LOGFIRE_ENABLED", True)
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TOKEN", "test-token")
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TRACE_PYDANTIC_AI", False)
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TRACE_SQLALCHEMY", False)
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TRACE_HTTPX", False)
    @patch("placemaker_ai.core.monitoring.logfire")
    @patch("placemaker_ai.core.monitoring.logger")
    def test_skips_disabled_instrumentation_and_fastapi_without_app(self, mock_logger, mock_logfire):
        initialize_logfire()

        mock_logfire.configure.assert_called_once()
        mock_logfire.instrument_pydantic_ai.assert_not_called()
        mock_logfire.instrument_sqlalchemy.assert_not_called()
        mock_logfire.instrument_httpx.assert_not_called()
        mock_logfire.instrument_fastapi.assert_not_called()

    @patch("placemaker_ai.core.monitoring.LOGFIRE_ENABLED", True)
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TOKEN", "test-token")
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TRACE_PYDANTIC_AI", True)
    @patch("placemaker_ai.core.monitoring.logfire")
    @patch("placemaker_ai.core.monitoring.logger")
    def test_instrumentation_failure_is_a_warning(self, mock_logger, mock_logfire):
        mock_logfire.instrument_pydantic_ai.side_effect = RuntimeError("no pydantic-ai")

        initialize_logfire()

        warnings = [c[0][0] for c in mock_logger.warning.call_args_list]
        assert any("Failed to instrument Pydantic AI" in w for w in warnings)
        mock_logger.error.assert_not_called()

    @patch("placemaker_ai.core.monitoring.LOGFIRE_ENABLED", True)
    @patch("placemaker_ai.core.monitoring.LOGFIRE_TOKEN", "test-token")
    @patch("placemaker_ai.core.monitoring.logfire")
    @patch("placemaker_ai.core.monitoring.logger")
    def test_configure_failure_is_logged(self, mock_logger, mock_logfire):
        mock_logfire.configure.side_effect = ValueError("bad token")

        initialize_logfire()

        assert "Failed to initialize Logfire" in mock_logger.error.call_args[0][0]


class TestEventHelpers:
    """Test the structured event helpers."""

    @patch("placemaker_ai.core.monitoring.logfire")
    def test_log_api_request(self, mock_logfire):
        log_api_request("GET", "/api/v1/projects", 200, 12.5)

        mock_logfire.info.assert_called_once_with(
            "API request completed", method="GET", path="/api/v1/projects", status_code=200, duration_ms=12.5
        )

    @pytest.mark.parametrize("model,expected", [("gpt-4o-mini", "gpt-4o-mini"), (None, "rule-based")])
    @patch("placemaker_ai.core.monitoring.logfire")
    def test_log_analysis_run(self, mock_logfire, model, expected):
        log_analysis_run(project_id=3, feedback_count=40, duration_ms=820.0, model=model)

        assert mock_logfire.info.call_args.kwargs["model"] == expected
        assert mock_logfire.info.call_args.kwargs["feedback_count"] == 40

    @patch("placemaker_ai.core.monitoring.logfire")
    def test_log_external_lookup(self, mock_logfire):
        log_external_lookup("mapit", False, "timeout")

        mock_logfire.info.assert_called_once_with("External lookup", service="mapit", ok=False, detail="timeout")

    @pytest.mark.parametrize(
        "call,message",
        [
            (lambda: log_api_request("POST", "/x", 500, 1.0), "Could not log API request to Logfire: POST /x"),
            (lambda: log_analysis_run(9, 1, 1.0, None), "Could not log analysis run to Logfire: project_id=9"),
            (lambda: log_external_lookup("postcodes", True), "Could not log external lookup to Logfire: service=postcodes"),
        ],
    )
    @patch("placemaker_ai.core.monitoring.logger")
    @patch("placemaker_ai.core.monitoring.logfire")
    def test_degrades_to_debug(self, mock_logfire, mock_logger, call, message):
        mock_logfire.info.side_effect = RuntimeError("logfire down")

        call()

        mock_logger.debug.assert_called_once_with(message)
