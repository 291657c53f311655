"""
Utility helpers shared across the Flow Service.
"""

from flow_service.utils.logger import setup_logging, get_logger, bind_context, clear_context
from flow_service.utils.serialization import to_json_safe

__all__ = [
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "to_json_safe",
]
