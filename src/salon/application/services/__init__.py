"""
Application services for Salon.
"""

from salon.application.services.authorization_gate import AuthorizationGate
from salon.application.services.presence_broker import PresenceBroker

__all__ = ["AuthorizationGate", "PresenceBroker"]
