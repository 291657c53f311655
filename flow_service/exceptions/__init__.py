"""
Exception hierarchy for the Flow Service.
"""

from flow_service.exceptions.base_exceptions import (
    FlowServiceException,
    ValidationError,
    NotFoundError,
    ExternalServiceError,
    ConfigurationError,
)
from flow_service.exceptions.handlers import setup_exception_handlers
from flow_service.exceptions.flow_exceptions import (
    FlowCompilationError,
    TooManyScreensError,
    TooManyComponentsError,
    MissingComponentNameError,
    UnrecognizedComponentTypeError,
    DuplicateScreenIdError,
    CompilationIncompleteError,
)
from flow_service.exceptions.channel_exceptions import GraphAPIError

__all__ = [
    "FlowServiceException",
    "ValidationError",
    "NotFoundError",
    "ExternalServiceError",
    "ConfigurationError",
    "setup_exception_handlers",
    "FlowCompilationError",
    "TooManyScreensError",
    "TooManyComponentsError",
    "MissingComponentNameError",
    "UnrecognizedComponentTypeError",
    "DuplicateScreenIdError",
    "CompilationIncompleteError",
    "GraphAPIError",
]
