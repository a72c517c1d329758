"""Database models for bearer token authentication."""

from typing import ClassVar, Final, final, override

from django.conf import settings
from django.db import models

# Constants for field max lengths
_FINGERPRINT_MAX_LENGTH: Final = 64
_USER_AGENT_MAX_LENGTH: Final = 255


@final
class Token(models.Model):
    """Validation record for an issued bearer token.

    Only the fingerprint of the token is stored; the raw value is
    handed to the client once at login and never persisted.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tokens',
        db_index=True,
    )

    fingerprint = models.CharField(
        max_length=_FINGERPRINT_MAX_LENGTH,
        unique=True,
        help_text='URL-safe base64 SHA256 hash of the raw token',
    )

    user_agent = models.CharField(
        max_length=_USER_AGENT_MAX_LENGTH,
        blank=True,
        default='',
        help_text='Client user agent string at login',
    )

    created_at = models.DateTimeField(
        help_text='Token issue time',
    )

    last_used_at = models.DateTimeField(
        db_index=True,
        help_text='Last successful validation time',
    )

    class Meta:
        """Model metadata."""

        verbose_name = 'Token'  # type: ignore[mutable-override]
        verbose_name_plural = 'Tokens'  # type: ignore[mutable-override]
        ordering: ClassVar[list[str]] = ['-last_used_at']

        indexes: ClassVar[list[models.Index]] = [
            models.Index(
                fields=['user', '-last_used_at'],
                name='tokens_user_last_used_idx',
            ),
        ]

    @override
    def __str__(self) -> str:
        """String representation."""
        return f'{self.user.username} ({self.fingerprint[:8]})'
