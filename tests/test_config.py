"""Tests for settings and logging configuration."""

from unittest.mock import patch

import structlog

from conditional_validator.config import Settings, get_settings
from conditional_validator.log_config import configure_logging


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, monkeypatch):
        """Test default values with a clean environment."""
        for key in ("VALIDATOR_DEBUG", "VALIDATOR_LOG_LEVEL", "VALIDATOR_VALIDATE_ALL_MEMBERS"):
            monkeypatch.delenv(key, raising=False)

        settings = Settings(_env_file=None)

        assert settings.DEBUG is False
        assert settings.LOG_LEVEL == "info"
        assert settings.VALIDATE_ALL_MEMBERS is False

    def test_env_prefix(self, monkeypatch):
        """Test that settings are read from VALIDATOR_* variables."""
        monkeypatch.setenv("VALIDATOR_VALIDATE_ALL_MEMBERS", "true")
        monkeypatch.setenv("VALIDATOR_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.VALIDATE_ALL_MEMBERS is True
        assert settings.LOG_LEVEL == "debug"

    def test_get_settings_is_cached(self):
        """Test that get_settings returns a shared instance."""
        assert get_settings() is get_settings()


class TestConfigureLogging:
    """Test structlog configuration."""

    def test_json_renderer_by_default(self):
        """Test that non-debug settings render JSON."""
        with patch.object(structlog, "configure") as configure:
            configure_logging(Settings(_env_file=None, DEBUG=False, LOG_LEVEL="warning"))

        processors = configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer_in_debug(self):
        """Test that debug settings render for the console."""
        with patch.object(structlog, "configure") as configure:
            configure_logging(Settings(_env_file=None, DEBUG=True))

        processors = configure.call_args.kwargs["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
