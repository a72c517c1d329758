"""Django app configuration for identity app."""

from typing import override

from django.apps import AppConfig


class IdentityConfig(AppConfig):
    """Configuration for identity app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'server.apps.identity'
    verbose_name = 'Identity'

    @override
    def ready(self) -> None:
        """Check the token hash algorithm before serving any request."""
        from server.apps.identity.logic.token_hasher import (  # noqa: WPS433
            ensure_hash_algorithm,
        )

        ensure_hash_algorithm()
