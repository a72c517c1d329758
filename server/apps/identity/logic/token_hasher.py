"""One-way hashing of raw bearer tokens into storable fingerprints."""

import base64
import hashlib
from typing import Final

from django.core.exceptions import ImproperlyConfigured

_ALGORITHM: Final = 'sha256'


def ensure_hash_algorithm() -> None:
    """Check that the token hash algorithm is available.

    Called once at startup so a broken interpreter build fails
    immediately instead of on the first authenticated request.

    Raises:
        ImproperlyConfigured: If hashlib does not provide the algorithm.
    """
    try:
        hashlib.new(_ALGORITHM)
    except ValueError as error:
        raise ImproperlyConfigured(
            f'Token hash algorithm {_ALGORITHM!r} is not available',
        ) from error


def hash_token(raw_token: str) -> str:
    """Compute the validation fingerprint of a raw token.

    The fingerprint is the SHA256 digest of the UTF-8 encoded token,
    encoded with the URL-safe base64 alphabet (44 characters,
    ``=`` padded). It is safe to use in URLs, headers and as a
    database key.

    Args:
        raw_token: Raw bearer token as presented by the client.

    Returns:
        Fingerprint string.
    """
    digest = hashlib.new(_ALGORITHM, raw_token.encode('utf-8')).digest()
    return base64.urlsafe_b64encode(digest).decode('ascii')
