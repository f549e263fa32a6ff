"""
Subscribe authorization callback.

Lets an external broadcast transport ask whether the caller may join a
topic before it admits the subscription.
"""

from fastapi import APIRouter, Depends

from salon.di import Container
from salon.domain.entities.principal import Principal
from salon.presentation.api.dependencies import get_container, get_current_principal
from salon.presentation.schemas import BroadcastAuthRequest, BroadcastAuthResponse

router = APIRouter(prefix="/broadcasting", tags=["broadcasting"])


@router.post("/auth", response_model=BroadcastAuthResponse)
async def authorize_subscription(
    request: BroadcastAuthRequest,
    principal: Principal = Depends(get_current_principal),
    container: Container = Depends(get_container),
):
    """
    Authorize a subscription.

    Returns the presence descriptor the transport should share with the
    other subscribers.

    Raises:
        AuthorizationError: 403 if the caller may not subscribe
    """
    info = await container.broker.authorize_topic(principal, request.channel_name)
    return BroadcastAuthResponse(
        channel_name=request.channel_name,
        socket_id=request.socket_id,
        channel_data=info,
    )
