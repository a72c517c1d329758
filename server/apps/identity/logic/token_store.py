"""Token lookup by fingerprint.

The resolver depends only on the ``TokenStore`` capability, so it
can run against the Django ORM in production and an in-memory fake
in tests.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, final

from django.contrib.auth import get_user_model
from django.utils import timezone

from server.apps.identity.logic.token_policy import is_token_time_valid
from server.apps.identity.models import Token

# User type for Django's dynamic user model
_User = Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TokenRecord:
    """Validation record of an issued token."""

    fingerprint: str
    user_id: int
    user_agent: str
    created_at: datetime
    last_used_at: datetime


class TokenStore(Protocol):
    """Lookup of token records by fingerprint."""

    def find_by_fingerprint(self, fingerprint: str) -> TokenRecord | None:
        """Find the live record for a fingerprint.

        Implementations advance ``last_used_at`` on a successful lookup
        and never move it backwards.

        Args:
            fingerprint: Validation fingerprint of a raw token.

        Returns:
            TokenRecord if a live token matches, None otherwise.
        """


class UserRepository(Protocol):
    """Lookup of users by id."""

    def find_by_id(self, user_id: int) -> _User | None:
        """Find an active user.

        Args:
            user_id: User primary key.

        Returns:
            User instance, or None if missing or inactive.
        """


@final
class DjangoTokenStore:
    """TokenStore backed by the ``Token`` model."""

    def find_by_fingerprint(self, fingerprint: str) -> TokenRecord | None:
        """Find a live token and record its use.

        Tokens of inactive users and expired tokens are reported as
        missing. Expired rows are left for ``cleanup_expired_tokens``.

        Args:
            fingerprint: Validation fingerprint of a raw token.

        Returns:
            TokenRecord with the refreshed ``last_used_at``, or None.
        """
        token = (
            Token.objects.filter(
                fingerprint=fingerprint,
                user__is_active=True,
            )
            .select_related('user')
            .first()
        )
        if token is None:
            return None

        now = timezone.now()
        if not is_token_time_valid(token, now):
            logger.info(
                'Rejected expired token for user %s: %s',
                token.user.username,
                fingerprint[:8],
            )
            return None

        # Concurrent validations may only move the timestamp forward
        Token.objects.filter(
            pk=token.pk,
            last_used_at__lt=now,
        ).update(last_used_at=now)

        return TokenRecord(
            fingerprint=token.fingerprint,
            user_id=token.user_id,
            user_agent=token.user_agent,
            created_at=token.created_at,
            last_used_at=max(now, token.last_used_at),
        )


@final
class DjangoUserRepository:
    """UserRepository backed by the configured user model."""

    def find_by_id(self, user_id: int) -> _User | None:
        """Find an active user by primary key.

        Args:
            user_id: User primary key.

        Returns:
            User instance, or None if missing or inactive.
        """
        return get_user_model().objects.filter(
            pk=user_id,
            is_active=True,
        ).first()
