"""CSRF protection for the submission endpoints.

The secret lives in an httpOnly cookie and is echoed back by the form in the
x-csrf-token header; a request is accepted only when the two match.
"""

import hmac
import logging
import secrets

logger = logging.getLogger(__name__)

CSRF_TOKEN_HEADER = "x-csrf-token"
SECRET_BYTES = 32
SECRET_LENGTH = SECRET_BYTES * 2
COOKIE_MAX_AGE = 60 * 60 * 24


def cookie_name(production: bool) -> str:
    """Cookie holding the secret; __Host- prefixed when served over HTTPS."""
    return "__Host-csrf-secret" if production else "csrf-secret"


def generate_secret() -> str:
    return secrets.token_hex(SECRET_BYTES)


def is_well_formed(secret: str | None) -> bool:
    if not secret or len(secret) != SECRET_LENGTH:
        return False
    return all(ch in "0123456789abcdef" for ch in secret)


def get_or_create_secret(existing: str | None) -> str:
    """Reuse the cookie's secret when it looks like one of ours."""
    if is_well_formed(existing):
        return existing
    return generate_secret()


def verify_token(secret: str | None, token: str | None) -> bool:
    """Constant-time comparison of the cookie secret and the header token."""
    if not secret:
        logger.info("CSRF validation failed: No secret cookie")
        return False
    if not token:
        logger.info("CSRF validation failed: No token header")
        return False
    if not hmac.compare_digest(secret.encode(), token.encode()):
        logger.warning("CSRF validation failed: Token mismatch")
        return False
    return True
