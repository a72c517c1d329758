"""Exceptions for identity app."""


class InvalidCredentialsError(Exception):
    """Raised when a login attempt cannot be authenticated.

    The same error covers unknown usernames, wrong passwords and
    inactive accounts, so callers cannot tell which one happened.
    """

    def __init__(self) -> None:
        """Initialize InvalidCredentialsError."""
        super().__init__('Invalid username or password')
