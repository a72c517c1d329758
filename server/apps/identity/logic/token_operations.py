"""Token lifecycle: issuance at login, revocation and cleanup."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Final

from django.contrib.auth import authenticate, get_user_model
from django.db import transaction
from django.db.models import Q
from django.http import HttpRequest
from django.utils import timezone

from server.apps.identity.exceptions import InvalidCredentialsError
from server.apps.identity.logic.token_hasher import hash_token
from server.apps.identity.logic.token_policy import (
    can_be_token,
    generate_token_value,
    get_max_tokens_per_user,
    get_token_expiration,
    get_token_rolling_ttl,
    get_token_ttl,
)
from server.apps.identity.models import Token

# User type for Django's dynamic user model
_User = Any

_USER_AGENT_MAX_LENGTH: Final = 255

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IssuedToken:
    """Raw token handed to the client at login."""

    value: str = field(repr=False)
    expires_at: datetime


def create_token(
    username: str,
    password: str,
    user_agent: str = '',
    request: HttpRequest | None = None,
) -> IssuedToken:
    """Authenticate a user and issue a new bearer token.

    When the user already holds the maximum number of tokens, the
    least recently used ones are deleted to make room.

    Args:
        username: Login name.
        password: Plain text password.
        user_agent: Client user agent string.
        request: Optional request passed on to authentication backends.

    Returns:
        IssuedToken with the raw value and its expiration.

    Raises:
        InvalidCredentialsError: If the credentials are not accepted.
    """
    user: _User | None = authenticate(
        request=request,
        username=username,
        password=password,
    )
    if user is None or not user.is_active:
        logger.warning('Token request rejected for user: %s', username)
        raise InvalidCredentialsError

    token_value = generate_token_value()
    now = timezone.now()

    # Room for the new token within the per-user limit
    keep_count = max(0, get_max_tokens_per_user() - 1)

    with transaction.atomic():
        # Logins of one user serialize on the user row, so the limit holds
        # even when the user has no token rows to lock yet
        get_user_model().objects.select_for_update().get(pk=user.pk)
        kept_fingerprints = list(
            Token.objects.filter(user=user)
            .order_by('-last_used_at')
            .values_list('fingerprint', flat=True)[:keep_count],
        )
        evicted, _ = Token.objects.filter(user=user).exclude(
            fingerprint__in=kept_fingerprints,
        ).delete()
        if evicted:
            logger.info(
                '%d tokens evicted for user %s',
                evicted,
                user.username,
            )

        token = Token.objects.create(
            user=user,
            fingerprint=hash_token(token_value),
            user_agent=user_agent[:_USER_AGENT_MAX_LENGTH],
            created_at=now,
            last_used_at=now,
        )

    logger.info(
        'Token issued for user %s: %s',
        user.username,
        token.fingerprint[:8],
    )

    return IssuedToken(
        value=token_value,
        expires_at=get_token_expiration(token),
    )


def revoke_token(raw_token: str) -> bool:
    """Revoke a token (logout).

    Args:
        raw_token: Raw bearer token to revoke.

    Returns:
        True if a token was found and deleted, False otherwise.
    """
    if not can_be_token(raw_token):
        return False

    fingerprint = hash_token(raw_token)
    deleted, _ = Token.objects.filter(fingerprint=fingerprint).delete()

    if deleted:
        logger.info('Token revoked: %s', fingerprint[:8])

    return deleted > 0


def get_user_tokens(user: _User) -> list[Token]:
    """Get all stored tokens of a user.

    Args:
        user: User to get tokens for.

    Returns:
        List of Token instances, most recently used first.
    """
    return list(
        Token.objects.filter(user=user).order_by('-last_used_at'),
    )


def expired_tokens_filter(now: datetime) -> Q:
    """Build the filter matching tokens past either lifetime.

    Args:
        now: Current time.

    Returns:
        Q object for the Token model.
    """
    created_cutoff = now - timedelta(seconds=get_token_ttl())
    idle_cutoff = now - timedelta(seconds=get_token_rolling_ttl())
    return Q(created_at__lt=created_cutoff) | Q(last_used_at__lt=idle_cutoff)


def cleanup_expired_tokens() -> int:
    """Delete tokens that have expired.

    Returns:
        Number of tokens deleted.
    """
    deleted, _ = Token.objects.filter(
        expired_tokens_filter(timezone.now()),
    ).delete()

    if deleted:
        logger.info('Cleaned up %d expired tokens', deleted)

    return deleted
