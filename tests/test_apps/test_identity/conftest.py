"""Shared fixtures for identity app tests."""

from dataclasses import replace
from datetime import UTC, datetime
from types import SimpleNamespace

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

from server.apps.identity.logic.authentication import AuthenticationResolver
from server.apps.identity.logic.token_hasher import hash_token
from server.apps.identity.logic.token_store import TokenRecord
from server.apps.identity.models import Token

User = get_user_model()


class InMemoryTokenStore:
    """TokenStore fake keeping records in a dict.

    Records every fingerprint it is queried with.
    """

    def __init__(self) -> None:
        """Initialize empty store."""
        self.records: dict[str, TokenRecord] = {}
        self.lookups: list[str] = []

    def add(self, raw_token: str, user_id: int) -> TokenRecord:
        """Store a record for a raw token.

        Args:
            raw_token: Raw token to register.
            user_id: Owning user id.

        Returns:
            Stored TokenRecord.
        """
        now = datetime(2024, 1, 1, tzinfo=UTC)
        record = TokenRecord(
            fingerprint=hash_token(raw_token),
            user_id=user_id,
            user_agent='pytest',
            created_at=now,
            last_used_at=now,
        )
        self.records[record.fingerprint] = record
        return record

    def find_by_fingerprint(self, fingerprint: str) -> TokenRecord | None:
        """Find a record and advance its last use.

        Args:
            fingerprint: Fingerprint to look up.

        Returns:
            Stored record or None.
        """
        self.lookups.append(fingerprint)
        record = self.records.get(fingerprint)
        if record is None:
            return None
        record = replace(
            record,
            last_used_at=max(record.last_used_at, timezone.now()),
        )
        self.records[fingerprint] = record
        return record


class InMemoryUserRepository:
    """UserRepository fake returning preset users by id."""

    def __init__(self, users: dict[int, object]) -> None:
        """Initialize with users keyed by id."""
        self.users = users

    def find_by_id(self, user_id: int) -> object | None:
        """Find a preset user."""
        return self.users.get(user_id)


@pytest.fixture
def token_store():
    """Create in-memory token store with one token for user 42.

    Returns:
        InMemoryTokenStore instance.
    """
    store = InMemoryTokenStore()
    store.add('abc123', user_id=42)
    return store


@pytest.fixture
def resolver(token_store):
    """Create resolver over the in-memory store.

    Args:
        token_store: In-memory store fixture.

    Returns:
        AuthenticationResolver instance.
    """
    return AuthenticationResolver(token_store)


@pytest.fixture
def user_repository():
    """Create in-memory user repository knowing user 42.

    Returns:
        InMemoryUserRepository instance.
    """
    return InMemoryUserRepository({42: SimpleNamespace(id=42, username='fake')})


@pytest.fixture
def user(db):
    """Create test user.

    Returns:
        User instance for testing.
    """
    return User.objects.create_user(
        username='testuser',
        password='testpass123',
        email='test@example.com',
    )


@pytest.fixture
def other_user(db):
    """Create second test user for isolation tests.

    Returns:
        Second user instance.
    """
    return User.objects.create_user(
        username='otheruser',
        password='testpass123',
        email='other@example.com',
    )


@pytest.fixture
def stored_token(user):
    """Store a fresh token for the test user.

    Args:
        user: Test user fixture.

    Returns:
        Tuple of raw token value and Token instance.
    """
    raw_token = 'stored-raw-token'
    now = timezone.now()
    token = Token.objects.create(
        user=user,
        fingerprint=hash_token(raw_token),
        user_agent='Mobile/1.0',
        created_at=now,
        last_used_at=now,
    )
    return raw_token, token
