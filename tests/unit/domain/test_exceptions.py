"""
Unit tests for domain exceptions and the token payload.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from salon.domain.auth import TokenPayload
from salon.domain.exceptions import (
    AuthenticationError,
    AuthorizationError,
    FieldError,
    NotFoundError,
    SalonError,
    TokenExpiredError,
    ValidationError,
)


class TestDomainExceptions:
    """Unit tests for the exception hierarchy."""

    def test_validation_error_single_field(self):
        exc = ValidationError("name", "The name field is required.")

        assert exc.code == "VALIDATION_ERROR"
        assert [e.to_dict() for e in exc.errors] == [
            {"field": "name", "message": "The name field is required."}
        ]

    def test_validation_error_from_errors(self):
        exc = ValidationError.from_errors(
            [FieldError("name", "too long"), FieldError("description", "too long")]
        )

        assert [e.field for e in exc.errors] == ["name", "description"]

    def test_from_errors_requires_errors(self):
        with pytest.raises(ValueError):
            ValidationError.from_errors([])

    def test_codes(self):
        assert NotFoundError("Channel", 1).code == "NOT_FOUND"
        assert AuthorizationError().code == "FORBIDDEN"
        assert AuthenticationError().code == "AUTHENTICATION_ERROR"

    def test_hierarchy(self):
        assert issubclass(TokenExpiredError, AuthenticationError)
        assert issubclass(AuthenticationError, SalonError)
        assert issubclass(ValidationError, SalonError)


class TestTokenPayload:
    """Unit tests for TokenPayload."""

    def test_user_id_claim(self):
        payload = TokenPayload(user_id="alice", name="Alice", exp=2000000000)

        principal = payload.to_principal()
        assert principal.id == "alice"
        assert principal.display_name == "Alice"

    def test_sub_claim_accepted(self):
        payload = TokenPayload.model_validate({"sub": "bob", "exp": 2000000000})

        assert payload.user_id == "bob"
        assert payload.to_principal().display_name == "bob"

    def test_missing_subject_rejected(self):
        with pytest.raises(PydanticValidationError):
            TokenPayload.model_validate({"exp": 2000000000})

    def test_extra_claims_ignored(self):
        payload = TokenPayload.model_validate(
            {"user_id": "alice", "exp": 2000000000, "role": "admin"}
        )

        assert not hasattr(payload, "role")
