"""
Base exception classes for Flow Service.

Every error the service raises on purpose derives from
FlowServiceException, which carries the HTTP status and the error
payload the API handlers render.
"""

from datetime import datetime, UTC
from typing import Any, Dict, Optional

import structlog

from flow_service.config.constants import ErrorCategory
from flow_service.utils.logger import get_logger


class FlowServiceException(Exception):
    """
    Base exception class for all Flow Service custom exceptions.

    Args:
        message: Internal error message for logging
        error_code: Machine-readable error code
        status_code: HTTP status code of the API response
        details: Additional error details returned to the caller
        category: Error category
        user_message: Message returned to the caller, defaults to ``message``
        caused_by: Original exception that caused this error
    """

    def __init__(
            self,
            message: str,
            error_code: str = "INTERNAL_ERROR",
            status_code: int = 500,
            details: Optional[Dict[str, Any]] = None,
            category: ErrorCategory = ErrorCategory.INTERNAL,
            user_message: Optional[str] = None,
            caused_by: Optional[Exception] = None
    ):
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        self.category = category
        self.user_message = user_message or message
        self.caused_by = caused_by
        self.timestamp = datetime.now(UTC)

    def to_dict(self) -> Dict[str, Any]:
        """Error payload under the ``error`` key of API responses"""
        error = {
            "code": self.error_code,
            "message": self.user_message,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.details:
            error["details"] = self.details
        return {"error": error}

    def log_error(self, logger: Optional[structlog.stdlib.BoundLogger] = None) -> None:
        """Log at error level for server-side failures, warning for client errors"""
        logger = logger or get_logger(__name__)

        fields: Dict[str, Any] = {
            "error_code": self.error_code,
            "error_category": self.category.value,
            "status_code": self.status_code,
        }
        if self.details:
            fields["details"] = self.details
        if self.caused_by:
            fields["caused_by"] = str(self.caused_by)
            fields["caused_by_type"] = type(self.caused_by).__name__

        if self.status_code >= 500:
            logger.error(self.message, **fields)
        else:
            logger.warning(self.message, **fields)


class ValidationError(FlowServiceException):
    """Invalid input that passed request parsing."""

    def __init__(
            self,
            message: str = "Request validation failed",
            field: Optional[str] = None,
            value: Optional[Any] = None,
            **kwargs
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            category=ErrorCategory.VALIDATION,
            details=details,
            **kwargs
        )


class NotFoundError(FlowServiceException):
    """A resource the request refers to does not exist."""

    def __init__(
            self,
            message: str = "Resource not found",
            resource_type: Optional[str] = None,
            resource_id: Optional[str] = None,
            **kwargs
    ):
        details = kwargs.pop("details", {})
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            error_code="RESOURCE_NOT_FOUND",
            status_code=404,
            category=ErrorCategory.NOT_FOUND,
            details=details,
            **kwargs
        )


class ExternalServiceError(FlowServiceException):
    """A downstream service failed or answered with an error."""

    def __init__(
            self,
            message: str = "External service error",
            service_name: Optional[str] = None,
            status_code: int = 502,
            **kwargs
    ):
        details = kwargs.pop("details", {})
        if service_name:
            details["service_name"] = service_name

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", "EXTERNAL_SERVICE_ERROR"),
            status_code=status_code,
            category=ErrorCategory.EXTERNAL,
            details=details,
            **kwargs
        )


class ConfigurationError(FlowServiceException):
    """A setting needed for the operation is missing."""

    def __init__(
            self,
            message: str = "Configuration error",
            config_key: Optional[str] = None,
            **kwargs
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key

        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            status_code=500,
            category=ErrorCategory.INTERNAL,
            details=details,
            user_message="Service configuration error. Please contact support.",
            **kwargs
        )
