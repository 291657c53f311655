"""
Graph API (WhatsApp Cloud API) exceptions.

GraphAPIError relays what the platform answered: its HTTP status,
its error message and the raw response body.
"""

from typing import Any, Dict, Optional

from flow_service.exceptions.base_exceptions import ExternalServiceError


class GraphAPIError(ExternalServiceError):
    """Raised when a Graph API call fails or cannot be completed."""

    def __init__(
            self,
            message: str,
            status_code: int = 502,
            response_body: Optional[Any] = None,
            operation: Optional[str] = None,
            **kwargs
    ):
        details: Dict[str, Any] = {}
        if operation:
            details["operation"] = operation
        if response_body is not None:
            details["response"] = response_body

        super().__init__(
            message=message,
            service_name="graph_api",
            status_code=status_code,
            error_code="GRAPH_API_ERROR",
            details=details,
            **kwargs
        )
        self.response_body = response_body
        self.operation = operation

    @classmethod
    def from_response(cls, status_code: int, body: Any, operation: Optional[str] = None) -> "GraphAPIError":
        """Build the error from a non-2xx Graph API response."""
        message = f"Graph API request failed with status {status_code}"
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                message = error["message"]
        return cls(message, status_code=status_code, response_body=body, operation=operation)
