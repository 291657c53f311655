"""
Message API Routes
REST API endpoints for sending WhatsApp messages from the business number.
"""

from typing import Any

from fastapi import APIRouter

from flow_service.dependencies import WhatsAppChannelDep
from flow_service.models.schemas import (
    MarketingFlowRequest,
    SendButtonMessageRequest,
    SendDraftFlowRequest,
    SendListMessageRequest,
    SendPublishedFlowRequest,
    SendTextRequest,
)

router = APIRouter(tags=["messages"])


@router.post("/send-message", summary="Send a draft flow to a tester")
async def send_draft_flow(request: SendDraftFlowRequest, channel: WhatsAppChannelDep) -> Any:
    return await channel.send_draft_flow(
        to=request.send_to_number,
        flow_id=request.flow_id,
        screen_id=request.screen_id,
        flow_token=request.flow_token,
        data=request.initial_data()
    )


@router.post("/flows/{flow_id}/send", summary="Send a published flow")
async def send_published_flow(
        flow_id: str,
        request: SendPublishedFlowRequest,
        channel: WhatsAppChannelDep
) -> Any:
    return await channel.send_published_flow(
        to=request.customer_phone_number,
        flow_id=flow_id,
        screen_id=request.screen_id,
        header_text=request.header_text,
        body_text=request.body_text,
        footer_text=request.footer_text,
        data=request.custom_data,
        flow_token=request.flow_token
    )


@router.post("/marketing-flow", summary="Create a marketing template that opens a flow")
async def create_marketing_flow(request: MarketingFlowRequest, channel: WhatsAppChannelDep) -> Any:
    return await channel.create_flow_template(
        name=request.template_name,
        body_text=request.message_body,
        flow_id=request.flow_id,
        screen_id=request.screen_id
    )


@router.post("/messages/send-text", summary="Send a text message")
async def send_text(request: SendTextRequest, channel: WhatsAppChannelDep) -> Any:
    return await channel.send_text(request.recipient_phone_number, request.message_content)


@router.post("/send-button-message", summary="Send a reply-button message")
async def send_button_message(request: SendButtonMessageRequest, channel: WhatsAppChannelDep) -> Any:
    buttons = [{"id": button.id, "title": button.title} for button in request.buttons]
    return await channel.send_buttons(request.to, request.button_text, buttons)


@router.post("/send-list-message", summary="Send a list message")
async def send_list_message(request: SendListMessageRequest, channel: WhatsAppChannelDep) -> Any:
    sections = [section.model_dump(exclude_none=True) for section in request.sections]
    return await channel.send_list(
        to=request.to,
        header_text=request.header_text,
        body_text=request.body_text,
        footer_text=request.footer_text,
        button_text=request.button_text,
        sections=sections
    )
