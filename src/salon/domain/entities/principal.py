"""
Principal entity - the authenticated identity acting on the system.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Principal:
    """
    Authenticated user identity.

    Supplied by the identity provider and passed explicitly into every
    core operation. The core never looks up a "current user" by itself.

    Attributes:
        id: Stable principal identifier
        display_name: Human readable name shown to other members
    """

    id: str
    display_name: str

    def __post_init__(self):
        if not self.id:
            raise ValueError("Principal id is required")
