"""Unit tests for settings loading, logging setup and server wiring."""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from taskboard.logging import configure_logging, should_use_rich
from taskboard.settings import Settings


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that settings fall back to demo-friendly defaults."""
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)

        settings = Settings(_env_file=None)

        assert settings.supabase_url is None
        assert settings.tasks_table == "tasks"
        assert settings.remote_timeout_seconds == 10.0
        assert settings.mock_latency_scale == 1.0

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that upper-case environment variables are picked up."""
        monkeypatch.setenv("SUPABASE_URL", "https://abcd.supabase.co")
        monkeypatch.setenv("MOCK_LATENCY_SCALE", "0")
        monkeypatch.setenv("TASKS_TABLE", "board_tasks")

        settings = Settings(_env_file=None)

        assert settings.supabase_url == "https://abcd.supabase.co"
        assert settings.mock_latency_scale == 0
        assert settings.tasks_table == "board_tasks"


class TestLogging:
    """Tests for Rich/plain handler selection."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    @pytest.mark.parametrize(("value", "expected"), [("1", True), ("yes", True), ("0", False), ("false", False)])
    def test_env_toggle(self, monkeypatch: pytest.MonkeyPatch, value: str, expected: bool) -> None:
        """Test that TASKBOARD_RICH_LOGS overrides TTY detection."""
        monkeypatch.setenv("TASKBOARD_RICH_LOGS", value)

        assert should_use_rich() is expected

    def test_rich_handler(self) -> None:
        """Test that forcing Rich installs a single RichHandler."""
        configure_logging("debug", force_rich=True)

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], RichHandler)
        assert root.level == logging.DEBUG

    def test_plain_handler_and_noisy_loggers(self) -> None:
        """Test the plain handler and that HTTP client loggers are quieted."""
        configure_logging(logging.INFO, force_rich=False)

        root = logging.getLogger()
        assert not isinstance(root.handlers[0], RichHandler)
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("realtime").level == logging.WARNING

    def test_unknown_level_name_defaults_to_info(self) -> None:
        """Test that a bad LOG_LEVEL does not break startup."""
        configure_logging("chatty", force_rich=False)

        assert logging.getLogger().level == logging.INFO


def test_server_uses_configured_name() -> None:
    """Test that the FastMCP server is created under the settings name."""
    from taskboard.server import mcp
    from taskboard.settings import settings

    assert mcp.name == settings.server_name
