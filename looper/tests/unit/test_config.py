"""Unit tests for configuration selection and signing-key loading."""

from __future__ import annotations

import logging

import pytest

from looper.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    get_config,
    load_signing_key,
)
from looper.looper_app import create_app
from shared.test_helpers import TEST_PRIVATE_KEY

pytestmark = pytest.mark.unit

KEY_VARS = (
    "JWT_PRIVATE_KEY",
    "JWT_PRIVATE_KEY_PATH",
    "TEST_JWT_PRIVATE_KEY",
    "TEST_JWT_PRIVATE_KEY_PATH",
)


@pytest.fixture
def no_key_env(monkeypatch):
    for name in KEY_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.parametrize(
    "env, expected",
    [
        ("development", DevelopmentConfig),
        ("testing", TestingConfig),
        ("production", ProductionConfig),
        ("staging", DevelopmentConfig),
    ],
)
def test_get_config_by_name(env, expected):
    """Test that known names map to their class and unknown ones fall back."""
    assert get_config(env) is expected


def test_get_config_reads_flask_env(monkeypatch):
    """Test that FLASK_ENV picks the class when no name is passed."""
    monkeypatch.setenv("FLASK_ENV", "production")

    assert get_config() is ProductionConfig


def test_testing_config_points_at_test_broker():
    """Test that the testing profile never targets the real broker host."""
    assert TestingConfig.BROKER_URL == "http://broker.test/broker"
    assert TestingConfig.BROKER_TIMEOUT == 1


def test_signing_key_from_raw_env(no_key_env):
    """Test that raw PEM content is used directly."""
    no_key_env.setenv("JWT_PRIVATE_KEY", TEST_PRIVATE_KEY)

    assert load_signing_key(testing=False) == TEST_PRIVATE_KEY.strip()


def test_signing_key_from_path(no_key_env, tmp_path):
    """Test that the key is read from the path variable."""
    key_file = tmp_path / "looper.private.pem"
    key_file.write_text(TEST_PRIVATE_KEY, encoding="utf-8")
    no_key_env.setenv("JWT_PRIVATE_KEY_PATH", str(key_file))

    assert load_signing_key(testing=False) == TEST_PRIVATE_KEY


def test_testing_prefers_test_key(no_key_env):
    """Test that TEST_* variables win in testing mode only."""
    no_key_env.setenv("JWT_PRIVATE_KEY", "production-key")
    no_key_env.setenv("TEST_JWT_PRIVATE_KEY", "test-key")

    assert load_signing_key(testing=True) == "test-key"
    assert load_signing_key(testing=False) == "production-key"


def test_testing_reads_test_key_path(no_key_env, tmp_path):
    """Test that a TEST_ key file is used in testing mode and named in errors."""
    key_file = tmp_path / "test.private.pem"
    key_file.write_text(TEST_PRIVATE_KEY, encoding="utf-8")
    no_key_env.setenv("TEST_JWT_PRIVATE_KEY_PATH", str(key_file))

    assert load_signing_key(testing=True) == TEST_PRIVATE_KEY

    key_file.unlink()
    with pytest.raises(RuntimeError, match="TEST_JWT_PRIVATE_KEY_PATH"):
        load_signing_key(testing=True)


def test_missing_key_raises(no_key_env):
    """Test that an unconfigured key is reported clearly."""
    with pytest.raises(RuntimeError, match="Missing JWT key configuration"):
        load_signing_key(testing=False)


def test_unreadable_key_path_raises(no_key_env, tmp_path):
    """Test that a path pointing nowhere is reported clearly."""
    no_key_env.setenv("JWT_PRIVATE_KEY_PATH", str(tmp_path / "absent.pem"))

    with pytest.raises(RuntimeError, match="Unable to read JWT key file"):
        load_signing_key(testing=False)


def test_factory_logs_broker_url_source(monkeypatch, caplog):
    """Test that the factory reports where the broker URL came from."""
    monkeypatch.setenv("BROKER_URL", "http://override.test/broker")

    with caplog.at_level(logging.INFO, logger="looper.looper_app"):
        create_app("testing")

    assert "Using Broker URL from environment" in caplog.text


def test_factory_logs_default_broker_url(monkeypatch, caplog):
    """Test that the factory reports the default when BROKER_URL is unset."""
    monkeypatch.delenv("BROKER_URL", raising=False)

    with caplog.at_level(logging.INFO, logger="looper.looper_app"):
        create_app("testing")

    assert "BROKER_URL not set, defaulting to" in caplog.text
