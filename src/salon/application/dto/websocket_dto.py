"""
DTOs for WebSocket client frames.
"""

import json
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from salon.domain.exceptions import FieldError, ValidationError


class _ClientFrame(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SubscribeFrame(_ClientFrame):
    """Subscribe the connection to a channel."""

    type: Literal["subscribe"]
    channel_id: int = Field(..., ge=1, description="Channel ID")


class UnsubscribeFrame(_ClientFrame):
    """Unsubscribe the connection from a channel."""

    type: Literal["unsubscribe"]
    channel_id: int = Field(..., ge=1, description="Channel ID")


class SendFrame(_ClientFrame):
    """
    Send a message to a channel.

    Content is validated again by the message store; this only rejects
    frames that are obviously not text.
    """

    type: Literal["send"]
    channel_id: int = Field(..., ge=1, description="Channel ID")
    content: str = Field(..., description="Message text")

    @field_validator("content")
    @classmethod
    def validate_content_not_empty(cls, v: str) -> str:
        """Validate content is not blank."""
        if not v or not v.strip():
            raise ValueError("The content field is required.")
        return v


class PingFrame(_ClientFrame):
    """Client keepalive."""

    type: Literal["ping"]


ClientFrame = Annotated[
    Union[SubscribeFrame, UnsubscribeFrame, SendFrame, PingFrame],
    Field(discriminator="type"),
]

_client_frame_adapter: TypeAdapter = TypeAdapter(ClientFrame)


def parse_client_frame(raw: str, max_size: int = 65536):
    """
    Parse and validate one client frame.

    Args:
        raw: Raw text received from the socket
        max_size: Maximum frame size in bytes

    Returns:
        SubscribeFrame, UnsubscribeFrame, SendFrame or PingFrame

    Raises:
        ValidationError: If the frame is too large, not JSON or invalid
    """
    if len(raw.encode("utf-8")) > max_size:
        raise ValidationError("frame", f"Frame exceeds {max_size} bytes")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError("frame", "Frame must be valid JSON")

    if not isinstance(data, dict):
        raise ValidationError("frame", "Frame must be a JSON object")

    try:
        return _client_frame_adapter.validate_python(data)
    except PydanticValidationError as e:
        raise ValidationError.from_errors(
            [
                FieldError(
                    field=".".join(str(p) for p in err["loc"] if p not in _FRAME_TAGS)
                    or "type",
                    message=_clean_message(err["msg"]),
                )
                for err in e.errors()
            ]
        ) from e


_FRAME_TAGS = {"subscribe", "unsubscribe", "send", "ping"}


def _clean_message(msg: str) -> str:
    # pydantic prefixes messages raised from validators with "Value error, "
    prefix = "Value error, "
    return msg[len(prefix):] if msg.startswith(prefix) else msg
