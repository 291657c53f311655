"""
Pydantic schemas for API request validation.
Defines the request models used by the flow, message and store endpoints.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from flow_service.core.flows import FlowSchema
from flow_service.models.base_model import BaseRequestModel, NonEmptyStr


# ============================================================================
# FLOW SCHEMAS
# ============================================================================

class CreateFlowRequest(BaseRequestModel):
    """Request schema for registering a new flow."""

    name: NonEmptyStr
    categories: Optional[List[str]] = None


class OrchestrateFlowRequest(BaseRequestModel):
    """Request schema for the create → compile → upload → send pipeline."""

    flow_schema: FlowSchema = Field(..., alias="schema")
    flow_name: NonEmptyStr = Field(..., alias="flowName")
    customer_phone_number: NonEmptyStr = Field(..., alias="customerPhoneNumber")
    categories: Optional[List[str]] = None
    flow_token: Optional[str] = Field(default=None, alias="flowToken")


class BuilderRequest(BaseRequestModel):
    """Data-exchange request from the form builder flow."""

    data: Dict[str, Any]


# ============================================================================
# MESSAGE SCHEMAS
# ============================================================================

class SendDraftFlowRequest(BaseRequestModel):
    """Request schema for sending an unpublished flow to a tester."""

    flow_id: NonEmptyStr = Field(..., alias="flowId")
    send_to_number: NonEmptyStr = Field(..., alias="sendToNumber")
    flow_token: Optional[str] = Field(default=None, alias="flowToken")
    screen_id: NonEmptyStr = Field(default="RECOMMEND", alias="screenId")
    custom_key: Optional[str] = Field(default=None, alias="customKey")
    custom_value: Optional[Any] = Field(default=None, alias="customValue")

    def initial_data(self) -> Optional[Dict[str, Any]]:
        if not self.custom_key:
            return None
        return {self.custom_key: self.custom_value}


class SendPublishedFlowRequest(BaseRequestModel):
    """Request schema for sending a published flow."""

    customer_phone_number: NonEmptyStr = Field(..., alias="customerPhoneNumber")
    header_text: NonEmptyStr = Field(..., alias="headerText")
    body_text: NonEmptyStr = Field(..., alias="bodyText")
    footer_text: NonEmptyStr = Field(..., alias="footerText")
    screen_id: NonEmptyStr = Field(..., alias="screenId")
    custom_data: Dict[str, Any] = Field(..., alias="customData")
    flow_token: Optional[str] = Field(default=None, alias="flowToken")


class MarketingFlowRequest(BaseRequestModel):
    """Request schema for a marketing template that opens a flow."""

    template_name: NonEmptyStr = Field(..., alias="templateName")
    message_body: NonEmptyStr = Field(..., alias="messageBody")
    flow_id: NonEmptyStr = Field(..., alias="flowId")
    screen_id: NonEmptyStr = Field(..., alias="screenId")


class SendTextRequest(BaseRequestModel):
    recipient_phone_number: NonEmptyStr = Field(..., alias="recipientPhoneNumber")
    message_content: NonEmptyStr = Field(..., alias="messageContent")


class ReplyButton(BaseRequestModel):
    id: NonEmptyStr
    title: NonEmptyStr


class SendButtonMessageRequest(BaseRequestModel):
    to: NonEmptyStr
    button_text: NonEmptyStr = Field(..., alias="buttonText")
    buttons: List[ReplyButton] = Field(..., min_length=1)


class ListRow(BaseRequestModel):
    id: NonEmptyStr
    title: NonEmptyStr
    description: Optional[str] = None


class ListSection(BaseRequestModel):
    title: NonEmptyStr
    rows: List[ListRow] = Field(..., min_length=1)


class SendListMessageRequest(BaseRequestModel):
    to: NonEmptyStr
    header_text: NonEmptyStr = Field(..., alias="headerText")
    body_text: NonEmptyStr = Field(..., alias="bodyText")
    footer_text: NonEmptyStr = Field(..., alias="footerText")
    button_text: NonEmptyStr = Field(..., alias="buttonText")
    sections: List[ListSection] = Field(..., min_length=1)


# ============================================================================
# STORE SCHEMAS
# ============================================================================

class AssociateBotRequest(BaseRequestModel):
    user_id: NonEmptyStr = Field(..., alias="userId")
    workspace_id: NonEmptyStr = Field(..., alias="workspaceId")
    bot_id: NonEmptyStr = Field(..., alias="botId")
    role: NonEmptyStr


class WorkspaceForUserRequest(BaseRequestModel):
    user_id: NonEmptyStr = Field(..., alias="userId")
    workspace_data: Dict[str, Any] = Field(..., alias="workspaceData")


class AddUserToBotRequest(BaseRequestModel):
    bot_id: NonEmptyStr = Field(..., alias="botId")
    user_id: NonEmptyStr = Field(..., alias="userid")
    name: NonEmptyStr
    role: NonEmptyStr
    phone: Optional[str] = None


class EditFlowDataRequest(BaseRequestModel):
    """Stores a bot's screens in their pre-compiled form."""

    bot_id: NonEmptyStr = Field(..., alias="botId")
    screens: List[Dict[str, Any]]
    botinfo: Optional[Any] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    flow_id: Optional[str] = Field(default=None, alias="flowIdog")


class CreateCollectionRequest(BaseRequestModel):
    database: NonEmptyStr = Field(..., alias="dbName1")
    collection: NonEmptyStr


class FormDataRequest(BaseRequestModel):
    """A submitted form; stored in the database named by its submitter."""

    collection: NonEmptyStr
    data: Dict[str, Any] = Field(..., alias="data1")

    @field_validator("data")
    @classmethod
    def validate_submitter(cls, v):
        if not v.get("datafilledby"):
            raise ValueError("datafilledby is required")
        return v


class FetchLiveDataRequest(BaseRequestModel):
    """Submissions whose entrydatetime (epoch ms) lies in [startDate, endDate]."""

    database: NonEmptyStr
    collection: NonEmptyStr
    start_date: int = Field(..., alias="startDate")
    end_date: int = Field(..., alias="endDate")
