"""Resolution of raw bearer tokens to authenticated principals."""

import logging
from dataclasses import dataclass, field
from typing import final

from server.apps.identity.logic.token_hasher import hash_token
from server.apps.identity.logic.token_store import TokenStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AuthenticatedPrincipal:
    """User identity proven by a bearer token.

    Keeps the raw token for the response (e.g. refreshing the auth
    cookie). It must not be logged or persisted.
    """

    user_id: int
    raw_token: str = field(repr=False)


@final
class AuthenticationResolver:
    """Resolves raw tokens through a token store.

    Holds no state besides the store, so one instance can serve any
    number of concurrent requests.
    """

    def __init__(self, store: TokenStore) -> None:
        """Initialize resolver with a token store.

        Args:
            store: Store used to look up fingerprints.
        """
        self._store = store

    def resolve(self, raw_token: str | None) -> AuthenticatedPrincipal | None:
        """Resolve a raw token to the principal it authenticates.

        Unknown and expired tokens are not distinguished. Store errors
        are propagated unchanged.

        Args:
            raw_token: Raw bearer token from the request.

        Returns:
            AuthenticatedPrincipal, or None if the token does not match.
        """
        if not raw_token:
            return None

        fingerprint = hash_token(raw_token)
        record = self._store.find_by_fingerprint(fingerprint)
        if record is None:
            logger.debug('No live token for fingerprint %s', fingerprint[:8])
            return None

        return AuthenticatedPrincipal(
            user_id=record.user_id,
            raw_token=raw_token,
        )
