"""
Authenticate principal use case.
"""

from typing import Optional

from salon.domain.entities.principal import Principal
from salon.domain.exceptions import AuthenticationError
from salon.infrastructure.auth.jwt_verifier import JWTVerifier


class AuthenticatePrincipal:
    """
    Use case for resolving the principal behind a bearer token.

    The identity provider signs the token; this only verifies it.
    """

    def __init__(self, jwt_verifier: JWTVerifier):
        """
        Initialize use case.

        Args:
            jwt_verifier: JWT verifier infrastructure
        """
        self.jwt_verifier = jwt_verifier

    def execute(self, token: Optional[str]) -> Principal:
        """
        Authenticate a token.

        Raises:
            AuthenticationError: If the token is missing, expired or invalid
        """
        if not token:
            raise AuthenticationError("Authentication required")

        return self.jwt_verifier.authenticate(token)
