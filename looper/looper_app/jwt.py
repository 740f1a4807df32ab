"""
JWT token creation for the looper.

The broker service only accepts calls that carry a bearer token issued for
its audience, so every looper run mints a fresh token before talking to it.
Tokens are signed with RS256 (RSA-SHA256): the looper holds the private key
and the broker verifies with the matching public key.

Token structure (claims):
    - ``sub`` -- subject, the identifier the run is acting as.
    - ``upn`` -- user principal name, the same value as ``sub``; the
      broker reads the caller's name from this claim.
    - ``aud`` -- configured audience of the broker service.
    - ``iss`` -- configured issuer.  By convention this would be the
      looper's own URL; a fixed configured value keeps it portable.
    - ``iat`` / ``exp`` -- issued-at and expiration (UTC epoch seconds).
    - ``jti`` -- random token id so two tokens minted in the same second
      are still distinct.

Key Concepts Demonstrated:
- RS256 asymmetric signing with PyJWT
- Canonical JWT claims (sub, aud, iss, iat, exp, jti)
- Wrapping library failures in a single domain error
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

logger = logging.getLogger(__name__)

# Subject used when the caller does not name one.
FALLBACK_SUBJECT = "null"
DEFAULT_EXPIRY_SECONDS = 7200


class TokenBuildError(RuntimeError):
    """Raised when a bearer token cannot be assembled or signed."""


def create_token(
    subject: str | None,
    private_key: str,
    audience: str,
    issuer: str,
    expiry_seconds: int = DEFAULT_EXPIRY_SECONDS,
) -> str:
    """
    Create an RS256-signed JWT for calling the broker service.

    Args:
        subject: Name placed in both ``sub`` and ``upn``.  ``None`` is
            replaced by ``FALLBACK_SUBJECT``.
        private_key: The RSA private key in PEM format used to sign the
            token.
        audience: Value of the ``aud`` claim.
        issuer: Value of the ``iss`` claim.
        expiry_seconds: Number of seconds from *now* until the token
            expires.

    Returns:
        A compact JWS string (``header.payload.signature``).

    Raises:
        TokenBuildError: If audience or issuer is blank, or the key
            cannot sign the payload.
    """
    if subject is None:
        subject = FALLBACK_SUBJECT
    if not audience or not audience.strip():
        raise TokenBuildError("JWT audience is not configured")
    if not issuer or not issuer.strip():
        raise TokenBuildError("JWT issuer is not configured")

    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(seconds=int(expiry_seconds))

    payload: dict[str, Any] = {
        "sub": subject,
        "upn": subject,
        "aud": audience,
        "iss": issuer,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
        "jti": uuid.uuid4().hex,
    }

    try:
        token = jwt.encode(payload, private_key, algorithm="RS256")
    except (jwt.PyJWTError, ValueError, TypeError) as exc:
        # cryptography reports unparseable PEM data as ValueError/TypeError
        logger.error("Unable to sign JWT for subject %s: %s", subject, exc)
        raise TokenBuildError(f"Unable to sign JWT: {exc}") from exc

    logger.info("Created a JWT for subject %s", subject)
    return token


def bearer(token: str) -> str:
    """Format *token* as an ``Authorization`` header value."""
    return f"Bearer {token}"
