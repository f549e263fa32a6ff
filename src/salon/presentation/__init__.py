"""
Presentation layer for Salon.
"""
