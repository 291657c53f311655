"""
Errors raised by the MongoDB repositories.

RepositoryError wraps driver failures; EntityNotFoundError and
InvalidIdentifierError describe lookups the caller can correct.
"""

from datetime import datetime, UTC
from typing import Any, Dict, Optional


class RepositoryError(Exception):
    """A document store operation failed"""

    def __init__(
            self,
            message: str,
            original_error: Optional[Exception] = None,
            error_code: str = "REPOSITORY_ERROR",
            context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.error_code = error_code
        self.context = context or {}
        self.timestamp = datetime.now(UTC)

    def __str__(self) -> str:
        if not self.context:
            return self.message
        pairs = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({pairs})"


class EntityNotFoundError(RepositoryError):
    def __init__(self, entity_type: str, entity_id: Any, filters: Optional[Dict[str, Any]] = None):
        self.entity_type = entity_type
        self.entity_id = entity_id

        context: Dict[str, Any] = {"entity_type": entity_type, "entity_id": str(entity_id)}
        if filters:
            context["filters"] = filters

        super().__init__(f"{entity_type} not found", error_code="ENTITY_NOT_FOUND", context=context)


class InvalidIdentifierError(RepositoryError):
    """The value cannot be parsed as an ObjectId"""

    def __init__(self, entity_type: str, value: Any):
        self.entity_type = entity_type
        self.value = value

        super().__init__(
            f"Invalid {entity_type} ID format",
            error_code="INVALID_IDENTIFIER",
            context={"entity_type": entity_type, "value": str(value)},
        )
