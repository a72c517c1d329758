"""Request authentication with bearer tokens.

``TokenAuthenticationMiddleware`` attaches the resolved principal to
every request; ``token_required`` protects views that need one.
"""

import functools
import logging
from collections.abc import Callable
from typing import Final, final

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse

from server.apps.identity.logic.authentication import (
    AuthenticatedPrincipal,
    AuthenticationResolver,
)
from server.apps.identity.logic.credentials import (
    SCHEME,
    parse_authorization_header,
    parse_cookie_value,
)
from server.apps.identity.logic.token_store import (
    DjangoTokenStore,
    DjangoUserRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER: Final = 'Authorization'
PROBLEM_CONTENT_TYPE: Final = 'application/problem+json'

_UNAUTHORIZED_STATUS: Final = 401
_UNAUTHORIZED_PROBLEM: Final = {
    'type': 'about:blank',
    'title': 'Unauthorized',
    'status': _UNAUTHORIZED_STATUS,
    'detail': 'Valid bearer token required',
}

_View = Callable[..., HttpResponse]


def get_token_cookie_name() -> str:
    """Get the name of the cookie carrying the token.

    Returns:
        Cookie name from settings or default of 'token'.
    """
    return getattr(settings, 'TOKEN_COOKIE_NAME', 'token')


@final
class TokenAuthenticationMiddleware:
    """Resolves bearer tokens sent in the header or the cookie.

    Sets ``request.principal`` to an AuthenticatedPrincipal or None,
    and ``request.token_user`` to the active user or None.
    The header is tried first; a cookie is still tried when the
    header token does not resolve.
    """

    def __init__(
        self,
        get_response: Callable[[HttpRequest], HttpResponse],
        resolver: AuthenticationResolver | None = None,
        users: UserRepository | None = None,
    ) -> None:
        """Initialize middleware.

        Args:
            get_response: Next handler in the middleware chain.
            resolver: Token resolver, defaults to the ORM-backed one.
            users: User lookup, defaults to the ORM-backed one.
        """
        self.get_response = get_response
        self._resolver = resolver or AuthenticationResolver(DjangoTokenStore())
        self._users = users or DjangoUserRepository()

    def __call__(self, request: HttpRequest) -> HttpResponse:
        """Authenticate the request and pass it on.

        Args:
            request: Incoming request.

        Returns:
            Response of the next handler.
        """
        principal = self.authenticate(request)
        request.principal = principal  # type: ignore[attr-defined]
        request.token_user = (  # type: ignore[attr-defined]
            None if principal is None
            else self._users.find_by_id(principal.user_id)
        )
        return self.get_response(request)

    def authenticate(
        self,
        request: HttpRequest,
    ) -> AuthenticatedPrincipal | None:
        """Resolve the request credentials to a principal.

        Args:
            request: Incoming request.

        Returns:
            AuthenticatedPrincipal, or None if no credential resolves.
        """
        candidates = (
            parse_authorization_header(
                request.headers.get(AUTHORIZATION_HEADER),
            ),
            parse_cookie_value(
                request.COOKIES.get(get_token_cookie_name()),
            ),
        )
        for raw_token in candidates:
            principal = self._resolver.resolve(raw_token)
            if principal is not None:
                logger.debug(
                    'Request authenticated for user %d',
                    principal.user_id,
                )
                return principal
        return None


def unauthorized_response() -> JsonResponse:
    """Build the response sent for unauthenticated requests.

    Returns:
        401 problem details response with a ``WWW-Authenticate`` header.
    """
    response = JsonResponse(
        _UNAUTHORIZED_PROBLEM,
        status=_UNAUTHORIZED_STATUS,
        content_type=PROBLEM_CONTENT_TYPE,
    )
    response['WWW-Authenticate'] = SCHEME
    return response


def token_required(view: _View) -> _View:
    """Require a resolved bearer token for a view.

    Missing and invalid credentials get the same 401 response.

    Args:
        view: View function to protect.

    Returns:
        Wrapped view.
    """
    @functools.wraps(view)
    def wrapper(
        request: HttpRequest,
        *args: object,
        **kwargs: object,
    ) -> HttpResponse:
        if getattr(request, 'principal', None) is None:
            logger.info('Unauthenticated request to %s', request.path)
            return unauthorized_response()
        return view(request, *args, **kwargs)

    return wrapper
