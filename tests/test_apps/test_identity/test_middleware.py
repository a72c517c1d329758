"""Tests for token authentication middleware and view protection."""

import json

import pytest
from django.http import HttpResponse
from django.test import RequestFactory

from server.apps.identity.middleware import (
    PROBLEM_CONTENT_TYPE,
    TokenAuthenticationMiddleware,
    token_required,
)


@pytest.fixture
def request_factory():
    """Create request factory.

    Returns:
        RequestFactory instance.
    """
    return RequestFactory()


@pytest.fixture
def fake_middleware(resolver, user_repository):
    """Create middleware over the in-memory store and users.

    Args:
        resolver: Resolver fixture backed by the in-memory store.
        user_repository: In-memory user repository fixture.

    Returns:
        TokenAuthenticationMiddleware instance.
    """
    return TokenAuthenticationMiddleware(
        lambda request: HttpResponse('ok'),
        resolver=resolver,
        users=user_repository,
    )


@token_required
def protected_view(request):
    """Return the authenticated user id."""
    return HttpResponse(str(request.principal.user_id))


class TestTokenAuthenticationMiddleware:
    """Tests for TokenAuthenticationMiddleware."""

    def test_header_token(self, fake_middleware, request_factory):
        """Test bearer header authenticates the request."""
        request = request_factory.get('/', HTTP_AUTHORIZATION='Bearer abc123')

        fake_middleware(request)

        assert request.principal.user_id == 42
        assert request.principal.raw_token == 'abc123'
        assert request.token_user.username == 'fake'

    def test_cookie_token(self, fake_middleware, request_factory):
        """Test token cookie authenticates the request."""
        request = request_factory.get('/')
        request.COOKIES['token'] = 'abc123'

        fake_middleware(request)

        assert request.principal.user_id == 42

    def test_custom_cookie_name(self, fake_middleware, request_factory, settings):
        """Test cookie name comes from settings."""
        settings.TOKEN_COOKIE_NAME = 'auth'
        request = request_factory.get('/')
        request.COOKIES['auth'] = 'abc123'

        fake_middleware(request)

        assert request.principal.user_id == 42

    def test_invalid_header_falls_back_to_cookie(
        self,
        fake_middleware,
        request_factory,
    ):
        """Test an unknown header token does not hide a valid cookie."""
        request = request_factory.get('/', HTTP_AUTHORIZATION='Bearer unknown')
        request.COOKIES['token'] = 'abc123'

        fake_middleware(request)

        assert request.principal.raw_token == 'abc123'

    def test_header_preferred_over_cookie(
        self,
        fake_middleware,
        request_factory,
        token_store,
    ):
        """Test a valid header wins over a valid cookie."""
        token_store.add('cookie-token', user_id=7)
        request = request_factory.get('/', HTTP_AUTHORIZATION='Bearer abc123')
        request.COOKIES['token'] = 'cookie-token'

        fake_middleware(request)

        assert request.principal.user_id == 42

    @pytest.mark.parametrize('header', [
        'Basic abc123',
        'Bearer',
        'Bearer a b',
        'Bearer unknown',
    ])
    def test_unauthenticated(self, fake_middleware, request_factory, header):
        """Test malformed or unknown credentials leave no principal."""
        request = request_factory.get('/', HTTP_AUTHORIZATION=header)

        response = fake_middleware(request)

        assert request.principal is None
        assert request.token_user is None
        assert response.content == b'ok'

    @pytest.mark.django_db
    def test_orm_backed_default(self, request_factory, user, stored_token):
        """Test default middleware resolves stored tokens and loads user."""
        raw_token, _ = stored_token
        middleware = TokenAuthenticationMiddleware(
            lambda request: HttpResponse('ok'),
        )
        request = request_factory.get(
            '/',
            HTTP_AUTHORIZATION=f'Bearer {raw_token}',
        )

        middleware(request)

        assert request.principal.user_id == user.id
        assert request.token_user.username == 'testuser'

    @pytest.mark.django_db
    def test_token_user_is_none_when_user_row_is_gone(
        self,
        resolver,
        request_factory,
    ):
        """Test a principal without a stored user gets a plain None user."""
        middleware = TokenAuthenticationMiddleware(
            lambda request: HttpResponse('ok'),
            resolver=resolver,
        )
        request = request_factory.get('/', HTTP_AUTHORIZATION='Bearer abc123')

        middleware(request)

        assert request.principal.user_id == 42
        assert request.token_user is None

    @pytest.mark.django_db
    def test_token_user_is_none_for_inactive_user(
        self,
        token_store,
        resolver,
        request_factory,
        user,
    ):
        """Test a user deactivated after token resolution is not loaded."""
        token_store.add('inactive-token', user_id=user.id)
        user.is_active = False
        user.save()
        middleware = TokenAuthenticationMiddleware(
            lambda request: HttpResponse('ok'),
            resolver=resolver,
        )
        request = request_factory.get(
            '/',
            HTTP_AUTHORIZATION='Bearer inactive-token',
        )

        middleware(request)

        assert request.principal.user_id == user.id
        assert request.token_user is None


class TestTokenRequired:
    """Tests for the token_required decorator."""

    def test_allows_authenticated(self, fake_middleware, request_factory):
        """Test authenticated requests reach the view."""
        request = request_factory.get('/', HTTP_AUTHORIZATION='Bearer abc123')
        fake_middleware(request)

        response = protected_view(request)

        assert response.status_code == 200
        assert response.content == b'42'

    def test_rejects_missing_credentials(self, fake_middleware, request_factory):
        """Test a request without credentials gets a problem response."""
        request = request_factory.get('/')
        fake_middleware(request)

        response = protected_view(request)

        assert response.status_code == 401
        assert response['Content-Type'] == PROBLEM_CONTENT_TYPE
        assert response['WWW-Authenticate'] == 'bearer'
        assert json.loads(response.content)['status'] == 401

    def test_missing_and_invalid_look_the_same(
        self,
        fake_middleware,
        request_factory,
    ):
        """Test invalid credentials are indistinguishable from none."""
        missing = request_factory.get('/')
        invalid = request_factory.get('/', HTTP_AUTHORIZATION='Bearer unknown')
        fake_middleware(missing)
        fake_middleware(invalid)

        missing_response = protected_view(missing)
        invalid_response = protected_view(invalid)

        assert missing_response.status_code == invalid_response.status_code
        assert missing_response.content == invalid_response.content
        assert dict(missing_response.items()) == dict(invalid_response.items())

    def test_without_middleware(self, request_factory):
        """Test requests that skipped the middleware are rejected."""
        response = protected_view(request_factory.get('/'))

        assert response.status_code == 401
