"""
Domain exceptions for Salon.
"""

from salon.domain.exceptions.auth_exceptions import (
    AuthenticationError,
    TokenExpiredError,
    TokenInvalidError,
)
from salon.domain.exceptions.base import (
    AuthorizationError,
    FieldError,
    NotFoundError,
    SalonError,
    ValidationError,
)

__all__ = [
    "SalonError",
    "FieldError",
    "ValidationError",
    "NotFoundError",
    "AuthorizationError",
    "AuthenticationError",
    "TokenExpiredError",
    "TokenInvalidError",
]
