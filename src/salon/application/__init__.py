"""
Salon application layer - authorization, broker and use cases.
"""
