"""
Channel API routes.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from salon.application.use_cases import CreateChannelCommand
from salon.di import Container
from salon.domain.entities.principal import Principal
from salon.presentation.api.dependencies import get_container, get_current_principal
from salon.presentation.schemas import (
    ChannelPageResponse,
    ChannelResponse,
    CreateChannelRequest,
    LeaveChannelResponse,
)

router = APIRouter(prefix="/channels", tags=["channels"])


@router.get("", response_model=ChannelPageResponse)
async def list_public_channels(
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    principal: Principal = Depends(get_current_principal),
    container: Container = Depends(get_container),
):
    """
    List public channels, newest first.

    Page size is clamped to the configured maximum.
    """
    result = await container.get_list_channels_use_case().public(page, page_size)
    return ChannelPageResponse.from_page(result)


@router.get("/mine", response_model=ChannelPageResponse)
async def list_my_channels(
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    principal: Principal = Depends(get_current_principal),
    container: Container = Depends(get_container),
):
    """List channels the caller is a member of, newest first."""
    result = await container.get_list_channels_use_case().mine(
        principal, page, page_size
    )
    return ChannelPageResponse.from_page(result)


@router.post("", response_model=ChannelResponse, status_code=status.HTTP_201_CREATED)
async def create_channel(
    request: CreateChannelRequest,
    principal: Principal = Depends(get_current_principal),
    container: Container = Depends(get_container),
):
    """
    Create a channel. The caller becomes its first member.

    Raises:
        ValidationError: 422 if the name is missing, too long or taken
    """
    command = CreateChannelCommand(
        name=request.name,
        visibility=request.type,
        description=request.description,
    )
    channel = await container.get_create_channel_use_case().execute(
        principal, command
    )

    container.reporter.info(
        f"Channel created [id={channel.id}] [slug={channel.slug}] "
        f"[user={principal.id}]",
        context="API",
    )

    return ChannelResponse.from_entity(channel)


@router.get("/slug/{slug}", response_model=ChannelResponse)
async def get_channel_by_slug(
    slug: str,
    principal: Principal = Depends(get_current_principal),
    container: Container = Depends(get_container),
):
    channel = await container.get_get_channel_use_case().by_slug(principal, slug)
    return ChannelResponse.from_entity(channel)


@router.get("/{channel_id}", response_model=ChannelResponse)
async def get_channel(
    channel_id: int,
    principal: Principal = Depends(get_current_principal),
    container: Container = Depends(get_container),
):
    channel = await container.get_get_channel_use_case().by_id(principal, channel_id)
    return ChannelResponse.from_entity(channel)


@router.post("/{channel_id}/join", response_model=ChannelResponse)
async def join_channel(
    channel_id: int,
    principal: Principal = Depends(get_current_principal),
    container: Container = Depends(get_container),
):
    """
    Join a public channel. Joining twice is a no-op.

    Raises:
        NotFoundError: 404 if the channel does not exist
        AuthorizationError: 403 if the channel is private
    """
    channel = await container.get_join_channel_use_case().execute(
        principal, channel_id
    )
    return ChannelResponse.from_entity(channel)


@router.post("/{channel_id}/leave", response_model=LeaveChannelResponse)
async def leave_channel(
    channel_id: int,
    principal: Principal = Depends(get_current_principal),
    container: Container = Depends(get_container),
):
    """
    Leave a channel.

    Live subscriptions of the caller on this channel are torn down.
    """
    left = await container.get_leave_channel_use_case().execute(
        principal, channel_id
    )
    return LeaveChannelResponse(channel_id=channel_id, left=left)
