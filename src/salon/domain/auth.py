"""
Authentication domain models for Salon.

Defines the JWT token payload issued by the identity provider.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from salon.domain.entities.principal import Principal


class TokenPayload(BaseModel):
    """
    JWT token payload structure.

    Attributes:
        user_id: Principal identifier (``user_id`` or ``sub`` claim)
        name: Display name, defaults to the principal id
        exp: Token expiration timestamp (Unix epoch)
        iat: Token issued at timestamp (Unix epoch)
    """

    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("user_id", "sub"),
        description="Principal ID",
    )
    name: Optional[str] = Field(None, description="Display name")
    exp: int = Field(..., description="Expiration time (Unix timestamp)")
    iat: Optional[int] = Field(None, description="Issued at time (Unix timestamp)")

    def to_principal(self) -> Principal:
        """Principal this token authenticates."""
        return Principal(id=self.user_id, display_name=self.name or self.user_id)
