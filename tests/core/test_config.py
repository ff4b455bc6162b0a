"""Unit tests for src/core/config.py and src/core/logs.py"""

import logging

import pytest
from pydantic import ValidationError

from src.core.config import Settings, get_settings
from src.core.logs import ROOT_LOGGER_NAME, configure_logging


def test_defaults() -> None:
    settings = Settings.from_env({})
    assert settings.bot_move_delay == 0.5
    assert settings.win_reward == 200
    assert settings.consolation_reward == 100
    assert settings.base_budget == 38
    assert settings.strict_fen is False


def test_environment_overrides() -> None:
    """Values arrive as strings, pydantic converts them."""
    settings = Settings.from_env(
        {
            "REFORGED_BOT_MOVE_DELAY": "1.5",
            "REFORGED_STRICT_FEN": "true",
            "REFORGED_WIN_REWARD": "300",
            "UNRELATED_VARIABLE": "ignored",
        }
    )
    assert settings.bot_move_delay == 1.5
    assert settings.strict_fen is True
    assert settings.win_reward == 300


def test_negative_delay_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings.from_env({"REFORGED_BOT_MOVE_DELAY": "-1"})


def test_settings_are_cached() -> None:
    assert get_settings() is get_settings()


def test_configure_logging_is_idempotent() -> None:
    """Calling it again must not stack handlers (every record would be printed twice)."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    before = list(logger.handlers)
    try:
        configure_logging("INFO")
        configure_logging("DEBUG")
        added = [handler for handler in logger.handlers if handler not in before]
        assert len(added) <= 1
        assert logger.level == logging.DEBUG
    finally:
        logger.setLevel(logging.NOTSET)
        for handler in logger.handlers[:]:
            if handler not in before:
                logger.removeHandler(handler)
