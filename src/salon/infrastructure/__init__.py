"""
Infrastructure layer for Salon.
"""
