"""
JWT verification infrastructure for Salon.

Turns a bearer token from the identity provider into a principal.
"""

import time
from typing import Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from salon.domain.auth import TokenPayload
from salon.domain.entities.principal import Principal
from salon.domain.exceptions import TokenExpiredError, TokenInvalidError


class JWTVerifier:
    """
    JWT token verifier.

    Attributes:
        secret: JWT secret key for verification
        algorithm: JWT algorithm (default: HS256)
    """

    def __init__(self, secret: str, algorithm: str = "HS256"):
        """
        Initialize JWT verifier.

        Args:
            secret: JWT secret key
            algorithm: JWT algorithm (default: HS256)
        """
        self.secret = secret
        self.algorithm = algorithm

    def verify_token(self, token: str) -> TokenPayload:
        """
        Verify JWT token and return payload.

        Args:
            token: JWT token string

        Returns:
            Validated TokenPayload

        Raises:
            TokenExpiredError: If token is expired
            TokenInvalidError: If token is malformed or badly signed
        """
        if not token:
            raise TokenInvalidError("Missing token")

        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token expired")
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"Invalid token: {str(e)}")

        try:
            return TokenPayload.model_validate(payload)
        except PydanticValidationError as e:
            raise TokenInvalidError(
                f"Invalid token claims: {e.error_count()} error(s)"
            ) from e

    def authenticate(self, token: str) -> Principal:
        """Verify a token and return its principal."""
        return self.verify_token(token).to_principal()

    def create_token(
        self,
        principal: Principal,
        ttl_seconds: int = 3600,
        issued_at: Optional[int] = None,
    ) -> str:
        """
        Issue a token for a principal (tests and local tooling).

        Args:
            principal: Principal to encode
            ttl_seconds: Lifetime in seconds (negative yields an expired token)
            issued_at: Optional issue time (Unix timestamp)

        Returns:
            Encoded JWT
        """
        now = issued_at if issued_at is not None else int(time.time())
        payload = {
            "user_id": principal.id,
            "name": principal.display_name,
            "iat": now,
            "exp": now + ttl_seconds,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)
