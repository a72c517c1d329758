"""Token generation and expiry policy.

A token expires when it is older than the absolute TTL or has not
been used for longer than the rolling TTL, whichever comes first.
"""

import base64
import secrets
from datetime import datetime, timedelta
from typing import Protocol

from django.conf import settings


class TokenTimestamps(Protocol):
    """Anything carrying the two timestamps the policy looks at."""

    created_at: datetime
    last_used_at: datetime


def get_token_ttl() -> int:
    """Get absolute token lifetime.

    Returns:
        Lifetime in seconds from settings or default of 86400 (24 h).
    """
    return getattr(settings, 'TOKEN_TTL', 86400)


def get_token_rolling_ttl() -> int:
    """Get maximum idle time of a token.

    Returns:
        Idle time in seconds from settings or default of 3600 (1 h).
    """
    return getattr(settings, 'TOKEN_ROLLING_TTL', 3600)


def get_max_tokens_per_user() -> int:
    """Get maximum number of live tokens per user.

    Returns:
        Token limit from settings or default of 3.
    """
    return getattr(settings, 'MAX_TOKENS_PER_USER', 3)


def get_token_size_bytes() -> int:
    """Get number of random bytes in a generated token.

    Returns:
        Size from settings or default of 32 (256 bits).
    """
    return getattr(settings, 'TOKEN_SIZE_BYTES', 32)


def generate_token_value() -> str:
    """Generate a new random raw token.

    Returns:
        URL-safe base64 encoding of cryptographically random bytes.
    """
    random_bytes = secrets.token_bytes(get_token_size_bytes())
    return base64.urlsafe_b64encode(random_bytes).decode('ascii')


def can_be_token(value: str) -> bool:
    """Check if a value has the shape of a generated token.

    Args:
        value: Candidate raw token.

    Returns:
        True if value is strict URL-safe base64 of exactly the configured
        number of bytes.
    """
    try:
        decoded = base64.b64decode(value, altchars=b'-_', validate=True)
    except ValueError:
        return False
    return len(decoded) == get_token_size_bytes()


def is_token_time_valid(token: TokenTimestamps, now: datetime) -> bool:
    """Check if a token is still within both lifetimes.

    Args:
        token: Token record or model instance.
        now: Current time.

    Returns:
        True if the token has not expired.
    """
    ttl = timedelta(seconds=get_token_ttl())
    rolling_ttl = timedelta(seconds=get_token_rolling_ttl())
    return (
        token.created_at <= now
        and now - token.created_at <= ttl
        and now - token.last_used_at <= rolling_ttl
    )


def get_token_expiration(token: TokenTimestamps) -> datetime:
    """Get the instant a token expires if it is not used again.

    Args:
        token: Token record or model instance.

    Returns:
        Earlier of the absolute and the rolling expiration.
    """
    absolute = token.created_at + timedelta(seconds=get_token_ttl())
    rolling = token.last_used_at + timedelta(seconds=get_token_rolling_ttl())
    return min(absolute, rolling)
