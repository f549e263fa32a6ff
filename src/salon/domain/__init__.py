"""
Salon domain layer.

Entities, value objects, events, exceptions and the store and publisher
interfaces. Nothing here performs I/O.
"""
