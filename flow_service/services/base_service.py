"""
Base Service Class

Common logging and input checks shared by the flow service's services.
"""

from abc import ABC
from datetime import datetime, UTC
from typing import Any, Dict, Iterable
import structlog

from flow_service.exceptions import ValidationError


class BaseService(ABC):
    """Abstract base class for all services"""

    def __init__(self):
        self.logger = structlog.get_logger(self.__class__.__name__)
        self.service_name = self.__class__.__name__

    def log_operation(self, operation: str, **kwargs) -> None:
        """Log service operation with standard fields"""
        self.logger.info(
            "Service operation",
            service=self.service_name,
            operation=operation,
            timestamp=datetime.now(UTC).isoformat(),
            **kwargs
        )

    @staticmethod
    def _validate_required_fields(data: Dict[str, Any], required_fields: Iterable[str]) -> None:
        """Validate that required fields are present and non-empty"""
        missing_fields = [
            field for field in required_fields
            if data.get(field) in (None, "", [])
        ]

        if missing_fields:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing_fields)}",
                details={"missing_fields": missing_fields}
            )
