"""
Looper service configuration.

Defines environment-specific configuration classes for the looper.  Each
class captures the URL of the broker service that the looper exercises,
the claims used when minting bearer tokens, and operational settings such
as request timeouts.  The ``get_config`` factory selects the right class
based on the ``FLASK_ENV`` environment variable (or an explicit key).

Key Concepts Demonstrated:
- Class-based configuration with inheritance for DRY defaults
- Environment-variable overrides for 12-factor app deployability
- PEM signing key loaded from raw env content or from a file path
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_BROKER_URL = "http://broker-service:9080/broker"


def _key_sources(prefix: str) -> tuple[str, str]:
    """Return the raw PEM content and file path configured under *prefix*."""
    raw_key = os.environ.get(f"{prefix}JWT_PRIVATE_KEY", "").strip()
    key_path = os.environ.get(f"{prefix}JWT_PRIVATE_KEY_PATH", "").strip()
    return raw_key, key_path


def load_signing_key(*, testing: bool) -> str:
    """
    Resolve the private key used to sign looper tokens.

    Raw PEM content in ``JWT_PRIVATE_KEY`` wins over a file named by
    ``JWT_PRIVATE_KEY_PATH``.  In testing mode the ``TEST_`` variants are
    used instead whenever either of them is set.

    Raises:
        RuntimeError: If no key is configured or the key file is unreadable.
    """
    prefix = ""
    if testing and any(_key_sources("TEST_")):
        prefix = "TEST_"
    raw_key, key_path = _key_sources(prefix)

    if raw_key:
        return raw_key
    if key_path:
        try:
            return Path(key_path).read_text(encoding="utf-8")
        except OSError as exc:
            raise RuntimeError(
                f"Unable to read JWT key file at '{key_path}' from {prefix}JWT_PRIVATE_KEY_PATH."
            ) from exc
    raise RuntimeError(
        f"Missing JWT key configuration: set {prefix}JWT_PRIVATE_KEY or {prefix}JWT_PRIVATE_KEY_PATH."
    )


class Config:
    """
    Base (shared) configuration for the looper.

    All environment-specific classes inherit from ``Config`` so that
    common defaults only need to be stated once.
    """

    # Root URL of the broker REST API, including the ``/broker`` prefix.
    # An empty BROKER_URL falls back to the default, like an unset one.
    BROKER_URL: str = os.environ.get("BROKER_URL", "").strip() or DEFAULT_BROKER_URL

    # Seconds to wait for each broker call before giving up.
    BROKER_TIMEOUT: int = int(os.environ.get("BROKER_TIMEOUT", "10"))

    # Claims the broker service expects on every bearer token.
    JWT_AUDIENCE: str = os.environ.get("JWT_AUDIENCE", "stock-trader")
    JWT_ISSUER: str = os.environ.get("JWT_ISSUER", "http://stock-trader.ibm.com")
    JWT_EXPIRY_SECONDS: int = int(os.environ.get("JWT_EXPIRY_SECONDS", "7200"))


class DevelopmentConfig(Config):
    """Development-oriented overrides."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """
    Test-suite overrides.

    Points the broker URL at a non-routable test host so that unit tests
    never accidentally hit a real service.  The timeout is reduced to
    1 second so tests that simulate slow backends complete quickly.
    """

    DEBUG: bool = True
    TESTING: bool = True
    BROKER_URL: str = os.environ.get("TEST_BROKER_URL", "http://broker.test/broker")
    BROKER_TIMEOUT: int = int(os.environ.get("TEST_BROKER_TIMEOUT", "1"))
    JWT_AUDIENCE: str = os.environ.get("TEST_JWT_AUDIENCE", "stock-trader-test")
    JWT_ISSUER: str = os.environ.get("TEST_JWT_ISSUER", "http://issuer.test")


class ProductionConfig(Config):
    """
    Production-hardened overrides.

    All values are expected to come from environment variables set by the
    deployment orchestrator.
    """

    DEBUG: bool = False
    TESTING: bool = False


# Lookup table mapping environment name strings to their config classes.
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Return the configuration class for the given environment.

    Args:
        env: One of ``"development"``, ``"testing"``, or
            ``"production"``.  When *None*, the ``FLASK_ENV``
            environment variable is consulted, falling back to
            ``"development"`` if unset.

    Returns:
        The ``Config`` subclass matching the requested environment,
        or ``DevelopmentConfig`` if the key is unrecognised.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
