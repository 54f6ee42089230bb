"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables and that
the grouped configuration views carry the same values.
"""

import pytest

from placemaker_ai.server.core.config import (
    CivicDataConfig,
    CORSConfig,
    EmailConfig,
    OpenAIConfig,
    PostgreSQLConfig,
    Settings,
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove variables a developer shell may export."""
    for name in (
        "PLACEMAKER_AI_SERVER_HOST",
        "PLACEMAKER_AI_SERVER_PORT",
        "PLACEMAKER_AI_LOG_LEVEL",
        "PUBLIC_BASE_URL",
        "RESEND_API_URL",
        "EMAIL_FROM",
        "POSTCODES_API_URL",
        "CIVIC_API_TIMEOUT",
        "CORS_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)
        assert settings.server_host == "0.0.0.0"
        assert settings.server_port == 8000
        assert settings.log_level == "INFO"
        assert settings.public_base_url is None
        assert settings.openai_api_key is None
        assert settings.resend_api_key is None

    def test_server_binding(self, clean_env):
        clean_env.setenv("PLACEMAKER_AI_SERVER_HOST", "127.0.0.1")
        clean_env.setenv("PLACEMAKER_AI_SERVER_PORT", "9000")
        clean_env.setenv("PLACEMAKER_AI_LOG_LEVEL", "DEBUG")
        clean_env.setenv("PUBLIC_BASE_URL", "https://consult.example.com")

        settings = Settings(_env_file=None)

        assert settings.server_host == "127.0.0.1"
        assert settings.server_port == 9000
        assert settings.log_level == "DEBUG"
        assert settings.public_base_url == "https://consult.example.com"

    def test_database_url_from_environment(self):
        """The test suite runs against in-memory SQLite."""
        assert Settings(_env_file=None).database_url == "sqlite+aiosqlite:///:memory:"

    def test_cors_origins_json_list(self, clean_env):
        clean_env.setenv("CORS_ORIGINS", '["https://a.example", "https://b.example"]')
        assert Settings(_env_file=None).cors_origins == ["https://a.example", "https://b.example"]


class TestGroupedConfigs:
    """Test the grouped configuration properties."""

    def test_openai(self, clean_env):
        clean_env.setenv("OPENAI_API_KEY", "sk-test")
        openai = Settings(_env_file=None).openai
        assert isinstance(openai, OpenAIConfig)
        assert openai.api_key == "sk-test"
        assert openai.sentiment_model == "openai:gpt-4o-mini"
        assert openai.summary_model == "openai:gpt-4o"

    def test_email(self, clean_env):
        clean_env.setenv("RESEND_API_KEY", "re_123")
        clean_env.setenv("EMAIL_FROM", "Consult <consult@example.com>")
        email = Settings(_env_file=None).email
        assert isinstance(email, EmailConfig)
        assert email.api_key == "re_123"
        assert email.api_url == "https://api.resend.com"
        assert email.default_from == "Consult <consult@example.com>"
        assert email.webhook_secret is None

    def test_civic(self, clean_env):
        clean_env.setenv("POSTCODES_API_URL", "http://postcodes.local")
        clean_env.setenv("CIVIC_API_TIMEOUT", "2.5")
        civic = Settings(_env_file=None).civic
        assert isinstance(civic, CivicDataConfig)
        assert civic.postcodes_url == "http://postcodes.local"
        assert civic.mapit_url == "https://mapit.mysociety.org"
        assert civic.timeout == 2.5

    def test_postgres_and_cors(self, clean_env):
        settings = Settings(_env_file=None)
        assert isinstance(settings.postgres, PostgreSQLConfig)
        assert settings.postgres.port == 5432
        assert isinstance(settings.cors, CORSConfig)
        assert settings.cors.origins == ["*"]
        assert settings.cors.allow_credentials is True
