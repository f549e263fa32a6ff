"""
End-to-end fixtures: a full Salon app behind FastAPI's TestClient.
"""

from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient

from salon.config.settings import Settings
from salon.domain.entities.principal import Principal
from salon.main import SalonApp


@pytest.fixture
def salon_app(settings: Settings) -> SalonApp:
    return SalonApp(settings)


@pytest.fixture
def client(salon_app: SalonApp):
    """TestClient with the lifespan running (database connected)."""
    with TestClient(salon_app.app) as client:
        yield client


@pytest.fixture
def token_for(salon_app: SalonApp) -> Callable[[Principal], str]:
    verifier = salon_app.container.jwt_verifier
    return lambda principal: verifier.create_token(principal)


@pytest.fixture
def headers_for(token_for) -> Callable[[Principal], Dict[str, str]]:
    return lambda principal: {"Authorization": f"Bearer {token_for(principal)}"}
