"""Tests for settings and logging setup."""
import json
import logging

import pytest
from pydantic import ValidationError

from workflow_service.config import Settings, get_settings, reset_settings
from workflow_service.observability import setup_logging, with_run_context
from workflow_service.observability.logging import CustomJsonFormatter, RunContextFilter


class TestSettings:
    """Test Settings configuration."""

    def test_settings_default_values(self, monkeypatch):
        """Test default values are set correctly."""
        monkeypatch.delenv("WORKFLOW_HTTP_DEFAULT_TIMEOUT_MS", raising=False)

        settings = Settings()

        # env might be 'test' in test environment
        assert settings.env in ("development", "test")
        assert settings.log_level == "INFO"
        assert settings.http_default_timeout_ms == 15000
        assert settings.wait_default_delay_seconds == 60
        assert settings.wait_default_check_every_seconds == 30
        assert settings.wait_max_seconds == 86400
        assert settings.code_node_enabled is True

    def test_settings_from_env(self, monkeypatch):
        """Test settings are read from WORKFLOW_ variables."""
        monkeypatch.setenv("WORKFLOW_HTTP_DEFAULT_TIMEOUT_MS", "2500")
        monkeypatch.setenv("WORKFLOW_CODE_NODE_ENABLED", "false")

        settings = Settings()

        assert settings.http_default_timeout_ms == 2500
        assert settings.code_node_enabled is False

    def test_non_positive_limits_rejected(self, monkeypatch):
        """Test validation of limits."""
        monkeypatch.setenv("WORKFLOW_WAIT_MAX_SECONDS", "0")

        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reset_settings(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("WORKFLOW_LOG_LEVEL", "DEBUG")
        reset_settings()

        second = get_settings()

        assert second is not first
        assert second.log_level == "DEBUG"


class TestLogging:
    """Test structured logging."""

    def test_setup_logging_installs_json_handler(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging()
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, CustomJsonFormatter)
            assert root.level == logging.INFO
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_formatter_includes_run_context(self):
        formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
        record = logging.LogRecord("workflow", logging.INFO, __file__, 1, "Node done", None, None)
        for key, value in with_run_context(run_id="run-1", node_id="h1").items():
            setattr(record, key, value)
        RunContextFilter().filter(record)

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "Node done"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "workflow"
        assert payload["run_id"] == "run-1"
        assert payload["node_id"] == "h1"
        assert "workflow_id" not in payload

    def test_with_run_context_skips_empty(self):
        assert with_run_context(run_id=None, node_kind="http", success=True) == {
            "node_kind": "http",
            "success": True,
        }
