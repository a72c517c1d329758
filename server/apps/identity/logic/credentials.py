"""Extraction of raw bearer tokens from request credentials.

Malformed credentials are never an error here: anything that does
not look like a bearer token is reported as absent.
"""

from typing import Final

# Expected authentication scheme, compared case-insensitively
SCHEME: Final = 'bearer'

_AUTHORIZATION_PARTS: Final = 2
_SEPARATOR: Final = ' '


def parse_authorization_header(value: str | None) -> str | None:
    """Extract the raw token from an ``Authorization`` header value.

    Only ``Bearer <token>`` is accepted: exactly two parts separated
    by a single space, the first one equal to ``bearer`` in any case.

    Args:
        value: Header value, or None when the header is missing.

    Returns:
        Raw token, or None if the header is missing or malformed.
    """
    if value is None:
        return None

    parts = value.strip().split(_SEPARATOR)
    if len(parts) != _AUTHORIZATION_PARTS:
        return None

    scheme, raw_token = parts
    if scheme.lower() != SCHEME:
        return None

    return raw_token


def parse_cookie_value(value: str | None) -> str | None:
    """Extract the raw token from a cookie value.

    The cookie carries the token itself, without any scheme.

    Args:
        value: Cookie value, or None when the cookie is missing.

    Returns:
        Raw token, or None if the cookie is missing or empty.
    """
    if not value:
        return None
    return value


def extract_raw_token(
    authorization: str | None,
    cookie: str | None,
) -> str | None:
    """Extract a raw token, preferring the header over the cookie.

    Args:
        authorization: ``Authorization`` header value.
        cookie: Token cookie value.

    Returns:
        First raw token found, or None.
    """
    raw_token = parse_authorization_header(authorization)
    if raw_token is not None:
        return raw_token
    return parse_cookie_value(cookie)
