"""
Authentication infrastructure for Salon.
"""

from salon.infrastructure.auth.jwt_verifier import JWTVerifier

__all__ = ["JWTVerifier"]
