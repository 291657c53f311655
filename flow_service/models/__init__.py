"""
Data Models Package
==================

Request models of the Flow Service API. The form schema consumed by the
compiler lives in flow_service.core.flows.
"""

from .base_model import BaseRequestModel, NonEmptyStr

__all__ = ["BaseRequestModel", "NonEmptyStr"]
