"""
Conversion of MongoDB documents into JSON-safe structures.
"""

from datetime import datetime
from typing import Any

from bson import ObjectId


def to_json_safe(value: Any) -> Any:
    """Recursively convert ObjectId and datetime values for JSON responses."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: to_json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_safe(item) for item in value]
    return value
