"""
Statistics API routes.
Provides operational metrics about the Salon service.
"""

from fastapi import APIRouter, Depends

from salon.di import Container
from salon.presentation.api.dependencies import get_container
from salon.presentation.schemas import StatsResponse

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=StatsResponse)
def get_stats(container: Container = Depends(get_container)):
    """
    Get Salon service statistics.

    Returns operational metrics including:
    - Active connections and topics with their subscriber counts
    - Messages stored, events delivered and dropped
    - Connection rejections by limit type
    """
    return container.get_stats()
