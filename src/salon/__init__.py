"""
Salon - membership-gated real-time channel messaging.

Clean Architecture implementation of channels, durable message history
and presence-aware live fan-out.
"""

from salon.main import SalonApp, create_app, main

__version__ = "0.1.0"
__all__ = ["SalonApp", "create_app", "main"]
