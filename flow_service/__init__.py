"""
Flow Service - WhatsApp Flow builder backend.

Compiles builder form schemas into WhatsApp Flow JSON, registers them
with the WhatsApp Cloud API and keeps the builder's users, workspaces
and bots in MongoDB.
"""

__version__ = "1.0.0"
__description__ = "WhatsApp Flow builder backend - Flow Service"

# Package metadata
__title__ = "flow-service"

# Semantic version components
VERSION_INFO = (1, 0, 0)

API_VERSION = "v1"

from flow_service.config.settings import get_settings
from flow_service.utils.logger import get_logger

__all__ = [
    "__version__",
    "__description__",
    "VERSION_INFO",
    "API_VERSION",
    "get_settings",
    "get_logger",
]
