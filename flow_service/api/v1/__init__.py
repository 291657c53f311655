"""
API v1 Package
Flow, message, store and health endpoints.
"""

from . import flow_routes, health_routes, message_routes, store_routes

__all__ = ["flow_routes", "health_routes", "message_routes", "store_routes"]
