"""
HTTP and WebSocket API for Salon.
"""
