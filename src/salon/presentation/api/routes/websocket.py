"""
WebSocket endpoint.

One socket per client. Subscriptions to channel topics are requested over
the socket and authorized against channel membership when they are made.
"""

import time
from typing import Any, Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status

from salon.application.dto import (
    PingFrame,
    SendFrame,
    SubscribeFrame,
    UnsubscribeFrame,
    parse_client_frame,
)
from salon.di import Container
from salon.domain.entities.principal import Principal
from salon.domain.events import MessageSentEvent
from salon.domain.exceptions import SalonError, ValidationError
from salon.infrastructure.websocket import ConnectionLimitExceeded, LiveConnection
from salon.presentation.api.dependencies import authenticate_websocket, get_container
from salon.presentation.api.error_handlers import error_body

router = APIRouter(tags=["websocket"])


def _error_frame(exc: SalonError) -> Dict[str, Any]:
    body = error_body(exc)
    return {"type": "error", "code": body.pop("error"), **body}


@router.websocket("/ws")
async def websocket_endpoint(
    websocket: WebSocket,
    principal: Principal = Depends(authenticate_websocket),
    container: Container = Depends(get_container),
):
    """
    WebSocket endpoint for live channel traffic.

    Authenticates with the ``token`` query parameter. Rejects new
    connections during graceful shutdown and enforces connection limits.

    Connection example:
        - ws://localhost:8080/ws?token=eyJ...
    """
    if principal is None:
        return

    reporter = container.reporter

    if container.shutdown_manager.is_shutting_down():
        reporter.warning(
            f"Connection rejected: server shutting down [user={principal.id}]",
            context="WebSocket",
        )
        container.increment_connection_rejection("shutdown")
        await websocket.close(
            code=status.WS_1001_GOING_AWAY,
            reason="Server is shutting down",
        )
        return

    await websocket.accept()

    broker = container.broker
    try:
        connection = broker.connect(websocket, principal)
    except ConnectionLimitExceeded as e:
        reporter.warning(
            f"Connection rejected: {e.limit_type} limit exceeded "
            f"[user={principal.id}]",
            context="WebSocket",
        )
        await websocket.send_json(
            {
                "type": "error",
                "code": "CONNECTION_LIMIT_EXCEEDED",
                "message": str(e),
                "limit_type": e.limit_type,
            }
        )
        await websocket.close(
            code=status.WS_1008_POLICY_VIOLATION,
            reason="Connection limit exceeded",
        )
        container.increment_connection_rejection(e.limit_type)
        return

    container.increment_stat("total_connections")
    reporter.info(
        f"Client connected [conn={connection.id}] [user={principal.id}] "
        f"[total_connections={container.connection_manager.get_total_connections()}]",
        context="WebSocket",
    )

    await connection.send({"type": "connected", "socket_id": connection.id})

    connection_start_time = time.time()
    frames_processed = 0
    max_frame_size = container.settings.max_frame_size

    try:
        while True:
            raw = await websocket.receive_text()
            container.increment_stat("total_frames_received")
            frames_processed += 1

            try:
                frame = parse_client_frame(raw, max_size=max_frame_size)
                await _handle_frame(frame, connection, container)
            except ValidationError as e:
                container.increment_stat("validation_failures")
                reporter.warning(
                    f"Frame rejected [conn={connection.id}] "
                    f"[errors={[err.to_dict() for err in e.errors]}]",
                    context="WebSocket",
                )
                await connection.send(_error_frame(e))
            except SalonError as e:
                reporter.info(
                    f"Frame refused [conn={connection.id}] [code={e.code}]: "
                    f"{e.message}",
                    context="WebSocket",
                )
                await connection.send(_error_frame(e))

    except WebSocketDisconnect:
        reporter.info(
            f"Client disconnected [conn={connection.id}]",
            context="WebSocket",
        )

    except Exception as e:
        reporter.error(
            f"WebSocket connection error [conn={connection.id}]: "
            f"{type(e).__name__}: {str(e)}",
            context="WebSocket",
        )

    finally:
        await broker.disconnect(connection)

        reporter.info(
            f"Connection closed [conn={connection.id}] "
            f"[duration={time.time() - connection_start_time:.2f}s] "
            f"[frames={frames_processed}] [sent={connection.frames_sent}] "
            f"[dropped={connection.frames_dropped}]",
            context="WebSocket",
        )


async def _handle_frame(frame, connection: LiveConnection, container: Container) -> None:
    """
    Handle one validated client frame.

    Replies go through the connection's queue, after any event already
    queued for it.
    """
    broker = container.broker

    if isinstance(frame, PingFrame):
        await connection.send({"type": "pong"})

    elif isinstance(frame, SubscribeFrame):
        await broker.subscribe(connection, frame.channel_id)
        await connection.send({"type": "subscribed", "channel_id": frame.channel_id})

    elif isinstance(frame, UnsubscribeFrame):
        await broker.unsubscribe(connection, frame.channel_id)
        await connection.send(
            {"type": "unsubscribed", "channel_id": frame.channel_id}
        )

    elif isinstance(frame, SendFrame):
        message = await broker.send(
            connection.principal,
            frame.channel_id,
            frame.content,
            origin_connection_id=connection.id,
        )
        stored = MessageSentEvent.from_message(message).to_frame()
        stored["type"] = "message.stored"
        await connection.send(stored)
