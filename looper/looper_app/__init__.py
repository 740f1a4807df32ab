"""
Looper service application factory.

This module provides the Flask application factory for the looper, a
smoke/load-testing driver that repeatedly exercises the broker REST API
and answers with a plain-text transcript of the calls it made.

Key Concepts Demonstrated:
- Application Factory pattern (create_app) for flexible configuration
- Blueprint registration for modular route organisation
- Environment-aware configuration loading via get_config
"""

from __future__ import annotations

import logging
import os

from flask import Flask

from looper.config import get_config, load_signing_key

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(config_name: str | None = None) -> Flask:
    """
    Construct and configure the looper Flask application.

    Args:
        config_name: Optional environment key ("development", "testing",
            "production").  When *None*, the FLASK_ENV environment
            variable is consulted, defaulting to "development".

    Returns:
        A fully-configured Flask application with the looper blueprint
        registered.
    """
    app = Flask(__name__)
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    app.config["JWT_PRIVATE_KEY"] = load_signing_key(testing=bool(app.config.get("TESTING")))

    logger.info("Creating looper app with config: %s", config_class.__name__)
    if os.environ.get("BROKER_URL", "").strip():
        logger.info("Using Broker URL from environment: %s", app.config["BROKER_URL"])
    else:
        logger.info("BROKER_URL not set, defaulting to: %s", app.config["BROKER_URL"])

    from .routes import looper_bp

    app.register_blueprint(looper_bp)
    return app
