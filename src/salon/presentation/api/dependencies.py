"""
FastAPI dependencies for the Salon API.

Provides dependency injection and principal resolution for routes.
"""

from typing import Optional

from fastapi import Depends, Query, WebSocket, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from salon.di import Container
from salon.domain.entities.principal import Principal
from salon.domain.exceptions import AuthenticationError, TokenExpiredError

# Global container (initialized in main.py)
_container: Optional[Container] = None

# Bearer token security scheme; missing headers become AuthenticationError
security = HTTPBearer(auto_error=False)


def get_container() -> Container:
    """
    Get DI container instance.

    Raises:
        RuntimeError: If container not initialized
    """
    if _container is None:
        raise RuntimeError("Container not initialized")
    return _container


def set_container(container: Optional[Container]) -> None:
    """
    Set DI container (called from main.py).

    Args:
        container: Container instance to set globally
    """
    global _container
    _container = container


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    container: Container = Depends(get_container),
) -> Principal:
    """
    Resolve the principal behind the bearer token.

    Raises:
        AuthenticationError: If the token is missing, expired or invalid
            (mapped to 401 by the exception handlers)
    """
    token = credentials.credentials if credentials else None
    return container.get_authenticate_use_case().execute(token)


async def authenticate_websocket(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    container: Container = Depends(get_container),
) -> Optional[Principal]:
    """
    Authenticate a WebSocket connection from its ``token`` query parameter.

    Closes the socket with 1008 on failure.

    Returns:
        Principal if authenticated, None if the socket was closed
    """
    try:
        return container.get_authenticate_use_case().execute(token)
    except TokenExpiredError:
        reason = "Token expired"
    except AuthenticationError as e:
        reason = e.message

    container.reporter.warning(
        f"WebSocket authentication failed: {reason}", context="WebSocket"
    )
    container.increment_connection_rejection("authentication")
    await websocket.close(code=status.WS_1008_POLICY_VIOLATION, reason=reason)
    return None
