"""
Dependency injection for Salon.
"""

from salon.di.container import Container

__all__ = ["Container"]
