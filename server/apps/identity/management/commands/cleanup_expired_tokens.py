"""Management command to delete expired bearer tokens."""

import logging
from typing import Any, final, override

from django.core.management.base import BaseCommand
from django.utils import timezone

from server.apps.identity.logic.token_operations import (
    cleanup_expired_tokens,
    expired_tokens_filter,
)
from server.apps.identity.models import Token

logger = logging.getLogger(__name__)


@final
class Command(BaseCommand):
    """Delete tokens past their absolute or rolling lifetime."""

    help = 'Delete expired bearer tokens'

    @override
    def add_arguments(self, parser: Any) -> None:
        """Add command line arguments.

        Args:
            parser: Argument parser.
        """
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be deleted without deleting',
        )

    @override
    def handle(self, *args: Any, **options: Any) -> None:
        """Execute the cleanup command.

        Args:
            args: Positional arguments (unused).
            options: Command options.
        """
        if options['dry_run']:
            expired = Token.objects.filter(
                expired_tokens_filter(timezone.now()),
            ).select_related('user')
            for token in expired:
                self.stdout.write(
                    f'Would delete: {token.fingerprint[:8]} '
                    f'(user: {token.user.username}, '
                    f'last used: {token.last_used_at})',
                )
            self.stdout.write(
                self.style.SUCCESS(
                    f'Would delete {len(expired)} expired tokens',
                ),
            )
            return

        deleted = cleanup_expired_tokens()
        logger.info('Expired token cleanup finished: %d deleted', deleted)
        self.stdout.write(
            self.style.SUCCESS(f'Deleted {deleted} expired tokens'),
        )
