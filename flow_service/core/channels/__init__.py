"""
Outbound WhatsApp Cloud API integration: the Graph API client and
message formatting.
"""

from flow_service.core.channels.graph_client import GraphAPIClient
from flow_service.core.channels.whatsapp_channel import (
    WhatsAppChannel,
    format_button_message,
    format_flow_message,
    format_flow_template,
    format_list_message,
    format_text_message,
    new_flow_token,
)

__all__ = [
    "GraphAPIClient",
    "WhatsAppChannel",
    "format_button_message",
    "format_flow_message",
    "format_flow_template",
    "format_list_message",
    "format_text_message",
    "new_flow_token",
]
