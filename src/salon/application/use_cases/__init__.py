"""
Application use cases for Salon.
"""

from salon.application.use_cases.authenticate_principal import AuthenticatePrincipal
from salon.application.use_cases.create_channel import (
    CreateChannel,
    CreateChannelCommand,
)
from salon.application.use_cases.get_channel import GetChannel
from salon.application.use_cases.get_message_history import GetMessageHistory
from salon.application.use_cases.join_channel import JoinChannel
from salon.application.use_cases.leave_channel import LeaveChannel
from salon.application.use_cases.list_channels import ListChannels
from salon.application.use_cases.send_message import SendMessage, SendMessageCommand

__all__ = [
    "AuthenticatePrincipal",
    "CreateChannel",
    "CreateChannelCommand",
    "GetChannel",
    "GetMessageHistory",
    "JoinChannel",
    "LeaveChannel",
    "ListChannels",
    "SendMessage",
    "SendMessageCommand",
]
