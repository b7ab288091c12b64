"""
Unit tests for logging and environment configuration.
"""

import logging

import pytest

from nick.config import (
    DEFAULT_LOG_LEVEL,
    VALID_LEVELS,
    configure_logging,
    get_log_level,
    get_logger,
    options_from_env,
)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    nick_logger = logging.getLogger("nick")
    root_level, root_handlers = root.level, list(root.handlers)
    nick_level = nick_logger.level
    yield
    root.handlers[:] = root_handlers
    root.setLevel(root_level)
    nick_logger.setLevel(nick_level)


class TestLogLevel:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert get_log_level() == VALID_LEVELS[DEFAULT_LOG_LEVEL]

    def test_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert get_log_level() == logging.DEBUG

    def test_invalid_falls_back(self, monkeypatch, capsys):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        assert get_log_level() == logging.INFO
        assert "Invalid LOG_LEVEL" in capsys.readouterr().err


class TestConfigureLogging:
    def test_sets_nick_level(self, restore_logging):
        configure_logging(level=logging.WARNING)

        assert logging.getLogger("nick").level == logging.WARNING

    def test_quiets_third_party_loggers(self, restore_logging):
        configure_logging(level=logging.INFO)

        assert logging.getLogger("playwright").level == logging.WARNING

    def test_get_logger(self):
        assert get_logger("nick.session") is logging.getLogger("nick.session")


class TestOptionsFromEnv:
    def test_only_set_variables_produce_keys(self, monkeypatch):
        for name in ("DEBUG", "LOAD_IMAGES", "TIMEOUT", "WHITELIST"):
            monkeypatch.delenv(f"NICK_{name}", raising=False)
        monkeypatch.setenv("NICK_USER_AGENT", "custom-agent")

        raw = options_from_env()

        assert raw["userAgent"] == "custom-agent"
        assert "loadImages" not in raw
        assert "timeout" not in raw

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("SCRAPER_BLACKLIST", "ads.net,,tracker.org ")

        raw = options_from_env(prefix="SCRAPER_")

        assert raw["blacklist"] == ["ads.net", "tracker.org"]
