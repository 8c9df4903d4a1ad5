"""
Unit Tests for Logging Configuration
====================================
"""

from docrender.config.logging import get_logger, get_logging_config
from docrender.config.settings import Settings


class TestLoggingConfig:
    """Test logging configuration dictionary."""

    def test_package_logger_does_not_propagate(self):
        """Test package records are not duplicated through the root logger."""
        config = get_logging_config(Settings(_env_file=None))

        assert config["loggers"]["docrender"]["propagate"] is False
        assert config["loggers"]["docrender"]["handlers"] == ["console"]

    def test_level_follows_settings(self):
        """Test logger and handler levels follow settings."""
        config = get_logging_config(Settings(_env_file=None, log_level="warning"))

        assert config["loggers"]["docrender"]["level"] == "WARNING"
        assert config["handlers"]["console"]["level"] == "WARNING"

    def test_formatter_by_environment(self):
        """Test plain formatter in production, standard elsewhere."""
        production = get_logging_config(Settings(_env_file=None, environment="production"))
        development = get_logging_config(Settings(_env_file=None, environment="development"))

        assert production["handlers"]["console"]["formatter"] == "plain"
        assert development["handlers"]["console"]["formatter"] == "standard"

    def test_backend_loggers_quieted(self):
        """Test third-party loggers are raised above INFO."""
        loggers = get_logging_config(Settings(_env_file=None))["loggers"]

        assert loggers["weasyprint"]["level"] == "ERROR"
        assert loggers["fontTools"]["level"] == "WARNING"

    def test_get_logger(self, caplog):
        """Test structured logger writes through the package logger."""
        get_logger("docrender.tests.logging").warning("Something happened", item="x")

        assert "Something happened" in caplog.text
