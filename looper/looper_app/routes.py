"""
Looper HTTP Routes.

Endpoints:
    GET /api/health              - Service health check
    GET /?id=<owner>&count=<n>   - Run the broker call sequence, plain text
    GET /jwt                     - Bearer token for the ``admin`` subject

Both text endpoints mint a fresh token per request; nothing is cached
between requests.
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, current_app, jsonify, request

from .client import BrokerClient
from .jwt import TokenBuildError, bearer, create_token
from .looper import BASE_ID, Looper

logger = logging.getLogger(__name__)

looper_bp = Blueprint("looper", __name__)

ADMIN_SUBJECT = "admin"


# =====================================================================
# Helper Functions
# =====================================================================


def _text(body: str, status: int = 200) -> Response:
    return Response(body, status=status, mimetype="text/plain")


def _bearer_token(subject: str | None) -> str:
    """Mint a token for *subject* using the app's configured claims."""
    config = current_app.config
    return bearer(
        create_token(
            subject,
            private_key=config["JWT_PRIVATE_KEY"],
            audience=config["JWT_AUDIENCE"],
            issuer=config["JWT_ISSUER"],
            expiry_seconds=config["JWT_EXPIRY_SECONDS"],
        )
    )


def _parse_count(raw: str | None) -> int:
    """
    Parse the ``count`` query parameter.

    Raises:
        ValueError: If the value is not a positive integer.
    """
    if raw is None or raw == "":
        return 1
    count = int(raw)
    if count < 1:
        raise ValueError(f"count must be a positive integer, got {count}")
    return count


# =====================================================================
# Route Handlers
# =====================================================================


@looper_bp.route("/api/health", methods=["GET"])
def health_check() -> tuple[Response, int]:
    """Shallow health probe; does not touch the broker service."""
    return jsonify({"status": "healthy", "service": "looper"}), 200


@looper_bp.route("/", methods=["GET"])
def loop() -> Response:
    """Run the call sequence ``count`` times for broker ``id``."""
    owner = request.args.get("id", BASE_ID)
    try:
        count = _parse_count(request.args.get("count"))
    except ValueError:
        return _text(f"Invalid count: {request.args.get('count')!r}\n", 400)

    try:
        authorization = _bearer_token(owner)
    except TokenBuildError as exc:
        return _text(f"Unable to create JWT: {exc}\n", 500)

    client = BrokerClient(
        current_app.config["BROKER_URL"],
        authorization,
        timeout=current_app.config["BROKER_TIMEOUT"],
    )
    result = Looper(client).run(owner, count)
    return _text(result.transcript)


@looper_bp.route("/jwt", methods=["GET"])
def get_jwt() -> Response:
    """Return a bearer token for the admin subject."""
    logger.info("Entering getJWT")
    try:
        return _text(_bearer_token(ADMIN_SUBJECT))
    except TokenBuildError as exc:
        return _text(f"Unable to create JWT: {exc}\n", 500)
