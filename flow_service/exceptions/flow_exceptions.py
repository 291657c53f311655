"""
Flow compilation exceptions.

Every failure the schema compiler can raise derives from
FlowCompilationError and is surfaced to API callers as a client error.
"""

from typing import Any, Dict, Optional

from flow_service.config.constants import ErrorCategory
from flow_service.exceptions.base_exceptions import FlowServiceException


class FlowCompilationError(FlowServiceException):
    """Base exception for schema compilation failures."""

    def __init__(
            self,
            message: str,
            error_code: str = "FLOW_COMPILATION_ERROR",
            details: Optional[Dict[str, Any]] = None,
            **kwargs
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=400,
            category=ErrorCategory.COMPILATION,
            details=details,
            **kwargs
        )


class TooManyScreensError(FlowCompilationError):
    """Raised when a schema declares more screens than a flow may hold."""

    def __init__(self, screen_count: int, max_screens: int):
        super().__init__(
            message=f"Maximum number of screens ({max_screens}) exceeded.",
            error_code="TOO_MANY_SCREENS",
            details={"screen_count": screen_count, "max_screens": max_screens}
        )
        self.screen_count = screen_count
        self.max_screens = max_screens


class TooManyComponentsError(FlowCompilationError):
    """Raised when a screen carries more components than allowed."""

    def __init__(self, screen_id: str, component_count: int, max_components: int):
        super().__init__(
            message=f"Screen {screen_id} exceeds maximum number of components ({max_components}).",
            error_code="TOO_MANY_COMPONENTS",
            details={
                "screen_id": screen_id,
                "component_count": component_count,
                "max_components": max_components,
            }
        )
        self.screen_id = screen_id


class MissingComponentNameError(FlowCompilationError):
    """Raised when an input component has no name to bind its value to."""

    def __init__(self, screen_id: str, index: int, component_type: str):
        super().__init__(
            message=f"Component missing name: {component_type} at position {index} on screen {screen_id}",
            error_code="MISSING_COMPONENT_NAME",
            details={"screen_id": screen_id, "index": index, "type": component_type}
        )


class UnrecognizedComponentTypeError(FlowCompilationError):
    """Raised for unknown component types when the compiler runs in reject mode."""

    def __init__(self, screen_id: str, index: int, component_type: str):
        super().__init__(
            message=f"Unrecognized component type '{component_type}' at position {index} on screen {screen_id}",
            error_code="UNRECOGNIZED_COMPONENT_TYPE",
            details={"screen_id": screen_id, "index": index, "type": component_type}
        )
        self.component_type = component_type


class DuplicateScreenIdError(FlowCompilationError):
    """Raised when two screens share an id."""

    def __init__(self, screen_id: str):
        super().__init__(
            message=f"Duplicate screen id: {screen_id}",
            error_code="DUPLICATE_SCREEN_ID",
            details={"screen_id": screen_id}
        )


class CompilationIncompleteError(FlowCompilationError):
    """Raised when fewer screens were compiled than were submitted."""

    def __init__(self, expected: int, compiled: int):
        super().__init__(
            message="Some screens were invalid. Flow JSON not generated.",
            error_code="COMPILATION_INCOMPLETE",
            details={"expected_screens": expected, "compiled_screens": compiled}
        )
