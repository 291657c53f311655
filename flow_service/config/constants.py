"""
Application constants and enumerations.

This module defines constant values and enumerations used throughout
the Flow Service.
"""

from enum import Enum

# Service Information
SERVICE_NAME = "flow-service"
SERVICE_VERSION = "1.0.0"
SERVICE_DESCRIPTION = "WhatsApp Flows builder backend - schema compiler and Graph API relay"

# API Configuration
API_PREFIX = "/api"

# WhatsApp Flow JSON envelope
FLOW_JSON_VERSION = "3.1"
FLOW_DATA_API_VERSION = "3.0"
FLOW_MESSAGE_VERSION = "3"
FLOW_ASSET_NAME = "flow.json"
FLOW_ASSET_TYPE = "FLOW_JSON"
DEFAULT_FLOW_CATEGORIES = ["OTHER"]

# Fields requested when reading a flow back from the Graph API
FLOW_DETAIL_FIELDS = (
    "id,name,categories,preview,status,validation_errors,json_version,"
    "data_api_version,data_channel_uri,whatsapp_business_account,application"
)

# Text shown on draft-mode flow messages; WhatsApp does not render it
DRAFT_MODE_TEXT = "Not shown in draft mode"

# Document store collections
USERS_COLLECTION = "users"
WORKSPACES_COLLECTION = "workspaces"
BOTS_COLLECTION = "bots"


# Bot association roles
class BotRole(str, Enum):
    """Role a user holds on a bot inside a workspace."""
    OWNER = "owner"
    USER = "user"


# Error Categories
class ErrorCategory(str, Enum):
    """Error categorization for monitoring."""
    VALIDATION = "validation"
    COMPILATION = "compilation"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"
    EXTERNAL = "external"
    TIMEOUT = "timeout"
    NETWORK = "network"

