"""
Schemas for statistics endpoints.
"""

from typing import Dict

from pydantic import BaseModel, Field


class LimitsInfo(BaseModel):
    max_total_connections: int
    max_connections_per_user: int
    subscriber_queue_size: int


class StatsResponse(BaseModel):
    """Runtime statistics."""

    uptime_seconds: float = Field(..., description="Server uptime in seconds")
    active_connections: int = Field(..., description="Currently open connections")
    active_topics: int = Field(..., description="Topics with subscribers")
    topics: Dict[str, int] = Field(..., description="Subscribers per topic")
    total_connections: int = Field(..., description="Connections since start")
    total_frames_received: int
    validation_failures: int
    connection_rejections: int
    connection_rejections_by_type: Dict[str, int]
    messages_stored: int
    events_published: int
    events_delivered: int
    events_dropped: int
    publish_failures: int
    delivery_failures: int
    limits: LimitsInfo
