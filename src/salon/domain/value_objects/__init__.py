"""
Domain value objects for Salon.
"""
from salon.domain.value_objects.channel_slug import ChannelSlug
from salon.domain.value_objects.page import Page
from salon.domain.value_objects.topic import Topic

__all__ = ["ChannelSlug", "Page", "Topic"]
