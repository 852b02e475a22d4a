"""Tests for environment-driven Settings."""

from pathlib import Path

import pytest

from pos.infrastructure.config import DEFAULT_DATA_DIR, Settings


def test_defaults():
    settings = Settings.from_env({})
    assert settings.data_dir == DEFAULT_DATA_DIR
    assert settings.max_transaction_attempts == 5
    assert settings.low_stock_threshold == 5
    assert settings.medium_stock_threshold == 20
    assert settings.log_level == "WARNING"
    assert settings.currency == "THB"


def test_overrides():
    settings = Settings.from_env(
        {
            "POS_DATA_DIR": "/tmp/pos",
            "POS_MAX_TRANSACTION_ATTEMPTS": "9",
            "POS_LOW_STOCK_THRESHOLD": "2",
            "POS_MEDIUM_STOCK_THRESHOLD": "8",
            "POS_LOG_LEVEL": "debug",
            "POS_CURRENCY": "usd",
        }
    )
    assert settings.data_dir == Path("/tmp/pos")
    assert settings.max_transaction_attempts == 9
    assert settings.low_stock_threshold == 2
    assert settings.medium_stock_threshold == 8
    assert settings.log_level == "DEBUG"
    assert settings.currency == "USD"


def test_blank_integer_uses_default():
    assert Settings.from_env({"POS_LOW_STOCK_THRESHOLD": " "}).low_stock_threshold == 5


def test_non_integer_rejected():
    with pytest.raises(ValueError, match="POS_MAX_TRANSACTION_ATTEMPTS must be an integer"):
        Settings.from_env({"POS_MAX_TRANSACTION_ATTEMPTS": "lots"})


def test_attempts_must_be_positive():
    with pytest.raises(ValueError, match="at least 1"):
        Settings.from_env({"POS_MAX_TRANSACTION_ATTEMPTS": "0"})


def test_thresholds_must_be_ordered():
    with pytest.raises(ValueError, match="cannot exceed"):
        Settings.from_env({"POS_LOW_STOCK_THRESHOLD": "30"})
