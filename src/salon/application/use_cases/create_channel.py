"""
Create channel use case.
"""

from dataclasses import dataclass
from typing import Optional

from salon.domain.entities.channel import Channel, Visibility
from salon.domain.entities.principal import Principal
from salon.domain.exceptions import ValidationError
from salon.domain.repositories.i_channel_store import IChannelStore


@dataclass
class CreateChannelCommand:
    """Command to create a channel."""

    name: str
    visibility: str = Visibility.PUBLIC.value
    description: Optional[str] = None


class CreateChannel:
    """
    Use case for creating a channel.

    Business rules:
    - Name must be unique (slug too)
    - Creator becomes the first member in the same transaction
    """

    def __init__(self, channel_store: IChannelStore):
        """
        Initialize use case.

        Args:
            channel_store: Channel store
        """
        self.channel_store = channel_store

    async def execute(
        self, principal: Principal, command: CreateChannelCommand
    ) -> Channel:
        """
        Create a channel owned by the principal.

        Raises:
            ValidationError: If name, description or visibility is invalid
        """
        try:
            visibility = Visibility(command.visibility)
        except ValueError:
            raise ValidationError("type", "The selected type is invalid.")

        return await self.channel_store.create(
            name=command.name,
            visibility=visibility,
            creator_id=principal.id,
            description=command.description,
        )
