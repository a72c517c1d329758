"""Django admin configuration for identity app."""

from datetime import datetime
from typing import override

from django.contrib import admin
from django.db.models import QuerySet
from django.http import HttpRequest
from django.utils import timezone

from server.apps.identity.logic.token_policy import (
    get_token_expiration,
    is_token_time_valid,
)
from server.apps.identity.models import Token


@admin.register(Token)
class TokenAdmin(admin.ModelAdmin[Token]):
    """Issued tokens. View and delete only; deleting revokes the token."""

    list_display = [
        'fingerprint_prefix',
        'user',
        'user_agent',
        'last_used_at',
        'expires_at',
        'is_live',
    ]

    search_fields = ['user__username']

    @admin.display(description='Fingerprint')
    def fingerprint_prefix(self, obj: Token) -> str:
        return obj.fingerprint[:8]

    @admin.display(description='Expires at')
    def expires_at(self, obj: Token) -> datetime:
        return get_token_expiration(obj)

    @admin.display(description='Live', boolean=True)
    def is_live(self, obj: Token) -> bool:
        return is_token_time_valid(obj, timezone.now())

    @override
    def get_queryset(self, request: HttpRequest) -> QuerySet[Token]:
        return super().get_queryset(request).select_related('user')

    @override
    def has_add_permission(self, request: HttpRequest) -> bool:
        # Tokens are only issued at login
        return False

    @override
    def has_change_permission(
        self,
        request: HttpRequest,
        obj: Token | None = None,
    ) -> bool:
        return False
