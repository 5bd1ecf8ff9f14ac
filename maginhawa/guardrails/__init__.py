"""Guardrails protecting the submission endpoints."""

from maginhawa.guardrails.csrf import (
    CSRF_TOKEN_HEADER,
    cookie_name,
    get_or_create_secret,
    verify_token,
)
from maginhawa.guardrails.rate_limiter import RateLimiter

__all__ = [
    "CSRF_TOKEN_HEADER",
    "RateLimiter",
    "cookie_name",
    "get_or_create_secret",
    "verify_token",
]
