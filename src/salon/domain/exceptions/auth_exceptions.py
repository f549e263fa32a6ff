"""
Authentication exceptions.
"""

from salon.domain.exceptions.base import SalonError


class AuthenticationError(SalonError):
    """Base exception for authentication errors."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="AUTHENTICATION_ERROR")


class TokenExpiredError(AuthenticationError):
    """Raised when JWT token has expired."""

    pass


class TokenInvalidError(AuthenticationError):
    """Raised when JWT token is invalid."""

    pass
