"""
Configuration package for Flow Service.

This package provides centralized configuration management with
environment-based settings, validation, and constants.
"""

from flow_service.config.settings import get_settings, reload_settings, Settings
from flow_service.config.constants import (
    SERVICE_NAME,
    SERVICE_VERSION,
    API_PREFIX,
    FLOW_JSON_VERSION,
    FLOW_DATA_API_VERSION,
)

__all__ = [
    "get_settings",
    "reload_settings",
    "Settings",
    "SERVICE_NAME",
    "SERVICE_VERSION",
    "API_PREFIX",
    "FLOW_JSON_VERSION",
    "FLOW_DATA_API_VERSION",
]
