"""
Message API routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, status

from salon.application.use_cases import SendMessageCommand
from salon.di import Container
from salon.domain.entities.principal import Principal
from salon.presentation.api.dependencies import get_container, get_current_principal
from salon.presentation.schemas import (
    MessagePageResponse,
    MessageResponse,
    SendMessageRequest,
)

router = APIRouter(prefix="/channels/{channel_id}/messages", tags=["messages"])


@router.get("", response_model=MessagePageResponse)
async def get_history(
    channel_id: int,
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    principal: Principal = Depends(get_current_principal),
    container: Container = Depends(get_container),
):
    """
    Get message history, oldest first.

    Raises:
        NotFoundError: 404 if the channel does not exist or is hidden
        AuthorizationError: 403 if the caller is not a member
    """
    result = await container.get_message_history_use_case().execute(
        principal, channel_id, page, page_size
    )
    return MessagePageResponse.from_page(result)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    channel_id: int,
    request: SendMessageRequest,
    principal: Principal = Depends(get_current_principal),
    container: Container = Depends(get_container),
    x_socket_id: Optional[str] = Header(None, alias="X-Socket-ID"),
):
    """
    Store a message and broadcast it to the channel.

    The live connection named by ``X-Socket-ID`` (the sender's own) does
    not receive the broadcast.

    Raises:
        NotFoundError: 404 if the channel does not exist
        AuthorizationError: 403 if the caller is not a member
        ValidationError: 422 if content is empty or too long
    """
    command = SendMessageCommand(
        channel_id=channel_id,
        content=request.content,
        socket_id=x_socket_id,
    )
    message = await container.get_send_message_use_case().execute(principal, command)
    return MessageResponse.from_entity(message)
