"""
Send message use case.
"""

from dataclasses import dataclass
from typing import Optional

from salon.application.services.presence_broker import PresenceBroker
from salon.domain.entities.message import Message
from salon.domain.entities.principal import Principal


@dataclass
class SendMessageCommand:
    """Command to send a message."""

    channel_id: int
    content: str
    socket_id: Optional[str] = None


class SendMessage:
    """
    Use case for sending a message.

    The broker checks membership, stores the message and fans it out to
    every other subscriber. ``socket_id`` names the sender's own live
    connection, which gets no echo.
    """

    def __init__(self, broker: PresenceBroker):
        self.broker = broker

    async def execute(self, principal: Principal, command: SendMessageCommand) -> Message:
        return await self.broker.send(
            principal,
            command.channel_id,
            command.content,
            origin_connection_id=command.socket_id,
        )
