"""
Request validation schemas for the Flow Service API.
"""

from flow_service.models.schemas.request_schemas import (
    # Flow schemas
    CreateFlowRequest,
    OrchestrateFlowRequest,
    BuilderRequest,

    # Message schemas
    SendDraftFlowRequest,
    SendPublishedFlowRequest,
    MarketingFlowRequest,
    SendTextRequest,
    SendButtonMessageRequest,
    SendListMessageRequest,

    # Store schemas
    AssociateBotRequest,
    WorkspaceForUserRequest,
    AddUserToBotRequest,
    EditFlowDataRequest,
    CreateCollectionRequest,
    FormDataRequest,
    FetchLiveDataRequest,
)

__all__ = [
    "CreateFlowRequest",
    "OrchestrateFlowRequest",
    "BuilderRequest",
    "SendDraftFlowRequest",
    "SendPublishedFlowRequest",
    "MarketingFlowRequest",
    "SendTextRequest",
    "SendButtonMessageRequest",
    "SendListMessageRequest",
    "AssociateBotRequest",
    "WorkspaceForUserRequest",
    "AddUserToBotRequest",
    "EditFlowDataRequest",
    "CreateCollectionRequest",
    "FormDataRequest",
    "FetchLiveDataRequest",
]
