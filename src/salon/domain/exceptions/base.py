"""
Base domain exceptions.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


class SalonError(Exception):
    """Base exception for all Salon domain errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


@dataclass(frozen=True)
class FieldError:
    """Single field-level validation failure."""

    field: str
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"field": self.field, "message": self.message}


class ValidationError(SalonError):
    """
    Raised when input is malformed.

    Carries a list of field errors so the boundary can report every
    problem at once. Raising it never leaves a partial write behind.
    """

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Validation failed for {field}: {reason}",
            code="VALIDATION_ERROR",
        )
        self.errors: List[FieldError] = [FieldError(field=field, message=reason)]

    @classmethod
    def from_errors(cls, errors: List[FieldError]) -> "ValidationError":
        """
        Build one exception out of several field errors.

        Args:
            errors: Non-empty list of field errors

        Returns:
            ValidationError carrying all errors
        """
        if not errors:
            raise ValueError("At least one field error is required")

        first = errors[0]
        exc = cls(first.field, first.message)
        exc.errors = list(errors)
        return exc


class NotFoundError(SalonError):
    """Raised when a referenced channel or message does not exist."""

    def __init__(self, entity_type: str, identifier: Any = None):
        super().__init__(f"{entity_type} not found", code="NOT_FOUND")
        self.entity_type = entity_type
        self.identifier = identifier


class AuthorizationError(SalonError):
    """
    Raised when a principal lacks permission for an operation.

    The message is shown to callers, so it must stay generic and never
    describe who the members of a channel are.
    """

    def __init__(
        self,
        message: str = "Forbidden",
        principal_id: Optional[str] = None,
        resource: Optional[str] = None,
    ):
        super().__init__(message, code="FORBIDDEN")
        self.principal_id = principal_id
        self.resource = resource
