"""Tests for logging setup."""

import logging

import structlog

from shopclient import configure_logging


class TestConfigureLogging:
    """Tests for configure_logging."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_configures_structlog(self):
        """Test structlog is routed through stdlib logging."""
        configure_logging("debug")

        assert structlog.is_configured()
        config = structlog.get_config()
        assert config["wrapper_class"] is structlog.stdlib.BoundLogger
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)

    def test_sets_root_level(self):
        """Test the level name is applied."""
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        root.handlers = []
        try:
            configure_logging("WARNING")
            assert root.level == logging.WARNING
        finally:
            root.handlers = handlers
            root.setLevel(level)
