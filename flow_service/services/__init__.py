"""
Services Package

Service layer of the flow service. Services coordinate the compiler, the
Graph API client and the repositories behind the API routes.

Service Architecture:
- BaseService: Abstract base with common logging and input checks
- FlowOrchestrationService: Compile, register, upload and send flows
- BuilderService: Data-exchange actions of the in-WhatsApp form builder
- StoreService: Cross-collection user/workspace/bot operations
"""

from .base_service import BaseService
from .builder_service import BuilderService
from .orchestration_service import FlowOrchestrationService
from .store_service import StoreService

__all__ = [
    "BaseService",
    "BuilderService",
    "FlowOrchestrationService",
    "StoreService",
]
