"""
WhatsApp message channel.

Formats the outbound WhatsApp Cloud API payloads (flow messages, text,
reply buttons, lists and flow marketing templates) and sends them
through the Graph API client.
"""

import uuid
from typing import Any, Dict, List, Optional

from flow_service.config.constants import DRAFT_MODE_TEXT, FLOW_MESSAGE_VERSION
from flow_service.core.channels.graph_client import GraphAPIClient
from flow_service.utils.logger import get_logger

DEFAULT_FLOW_CTA = "Open Flow!"
DEFAULT_TEMPLATE_LANGUAGE = "en_US"
DEFAULT_TEMPLATE_CATEGORY = "MARKETING"


def _base_message(to: str, message_type: str) -> Dict[str, Any]:
    return {
        "messaging_product": "whatsapp",
        "recipient_type": "individual",
        "to": to,
        "type": message_type,
    }


def new_flow_token() -> str:
    return uuid.uuid4().hex


def format_flow_message(
        to: str,
        flow_id: str,
        screen_id: str,
        flow_token: str,
        data: Optional[Dict[str, Any]] = None,
        header_text: str = DRAFT_MODE_TEXT,
        body_text: str = DRAFT_MODE_TEXT,
        footer_text: str = DRAFT_MODE_TEXT,
        cta: str = DRAFT_MODE_TEXT,
        draft: bool = True
) -> Dict[str, Any]:
    """
    Interactive flow message opening ``screen_id`` of a flow.

    Draft messages let the business test an unpublished flow; WhatsApp
    ignores header, body, footer and CTA texts for them.
    """
    parameters: Dict[str, Any] = {
        "flow_message_version": FLOW_MESSAGE_VERSION,
        "flow_action": "navigate",
        "flow_token": flow_token,
        "flow_id": flow_id,
        "flow_cta": cta,
    }
    if draft:
        parameters["mode"] = "draft"
    parameters["flow_action_payload"] = {"screen": screen_id}
    if data:
        parameters["flow_action_payload"]["data"] = data

    message = _base_message(to, "interactive")
    message["interactive"] = {
        "type": "flow",
        "header": {"type": "text", "text": header_text},
        "body": {"text": body_text},
        "footer": {"text": footer_text},
        "action": {"name": "flow", "parameters": parameters},
    }
    return message


def format_text_message(to: str, body: str, preview_url: bool = False) -> Dict[str, Any]:
    message = _base_message(to, "text")
    message["text"] = {"preview_url": preview_url, "body": body}
    return message


def format_button_message(to: str, body_text: str, buttons: List[Dict[str, str]]) -> Dict[str, Any]:
    """Reply-button message; each button is ``{"id", "title"}``."""
    message = _base_message(to, "interactive")
    message["interactive"] = {
        "type": "button",
        "body": {"text": body_text},
        "action": {
            "buttons": [
                {"type": "reply", "reply": {"id": button["id"], "title": button["title"]}}
                for button in buttons
            ]
        },
    }
    return message


def format_list_message(
        to: str,
        header_text: str,
        body_text: str,
        footer_text: str,
        button_text: str,
        sections: List[Dict[str, Any]]
) -> Dict[str, Any]:
    message = _base_message(to, "interactive")
    message["interactive"] = {
        "type": "list",
        "header": {"type": "text", "text": header_text},
        "body": {"text": body_text},
        "footer": {"text": footer_text},
        "action": {"button": button_text, "sections": sections},
    }
    return message


def format_flow_template(
        name: str,
        body_text: str,
        flow_id: str,
        screen_id: str,
        button_text: str = "Open flow!",
        language: str = DEFAULT_TEMPLATE_LANGUAGE,
        category: str = DEFAULT_TEMPLATE_CATEGORY
) -> Dict[str, Any]:
    """Message template whose single button opens a flow."""
    return {
        "name": name,
        "language": language,
        "category": category,
        "components": [
            {"type": "body", "text": body_text},
            {
                "type": "BUTTONS",
                "buttons": [
                    {
                        "type": "FLOW",
                        "text": button_text,
                        "flow_id": flow_id,
                        "navigate_screen": screen_id,
                        "flow_action": "navigate",
                    }
                ],
            },
        ],
    }


class WhatsAppChannel:
    """Sends formatted WhatsApp messages through a GraphAPIClient."""

    def __init__(self, graph_client: GraphAPIClient):
        self.graph_client = graph_client
        self.logger = get_logger(self.__class__.__name__)

    async def send_draft_flow(
            self,
            to: str,
            flow_id: str,
            screen_id: str,
            flow_token: Optional[str] = None,
            data: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        message = format_flow_message(
            to=to,
            flow_id=flow_id,
            screen_id=screen_id,
            flow_token=flow_token or new_flow_token(),
            data=data,
            draft=True
        )
        self.logger.info("Sending draft flow message", flow_id=flow_id, screen_id=screen_id)
        return await self.graph_client.send_message(message)

    async def send_published_flow(
            self,
            to: str,
            flow_id: str,
            screen_id: str,
            header_text: str,
            body_text: str,
            footer_text: str,
            data: Optional[Dict[str, Any]] = None,
            flow_token: Optional[str] = None,
            cta: str = DEFAULT_FLOW_CTA
    ) -> Dict[str, Any]:
        message = format_flow_message(
            to=to,
            flow_id=flow_id,
            screen_id=screen_id,
            flow_token=flow_token or new_flow_token(),
            data=data,
            header_text=header_text,
            body_text=body_text,
            footer_text=footer_text,
            cta=cta,
            draft=False
        )
        self.logger.info("Sending flow message", flow_id=flow_id, screen_id=screen_id)
        return await self.graph_client.send_message(message)

    async def send_text(self, to: str, body: str) -> Dict[str, Any]:
        return await self.graph_client.send_message(format_text_message(to, body))

    async def send_buttons(self, to: str, body_text: str, buttons: List[Dict[str, str]]) -> Dict[str, Any]:
        return await self.graph_client.send_message(format_button_message(to, body_text, buttons))

    async def send_list(
            self,
            to: str,
            header_text: str,
            body_text: str,
            footer_text: str,
            button_text: str,
            sections: List[Dict[str, Any]]
    ) -> Dict[str, Any]:
        message = format_list_message(to, header_text, body_text, footer_text, button_text, sections)
        return await self.graph_client.send_message(message)

    async def create_flow_template(
            self,
            name: str,
            body_text: str,
            flow_id: str,
            screen_id: str
    ) -> Dict[str, Any]:
        template = format_flow_template(name, body_text, flow_id, screen_id)
        self.logger.info("Creating flow message template", template_name=name, flow_id=flow_id)
        return await self.graph_client.create_message_template(template)
