"""
WhatsApp Cloud (Graph) API client.

Thin async wrapper over httpx for the flow and message endpoints. One
client is created per application lifespan and shared by all requests.
"""

import json
from typing import Any, Dict, List, Optional

import httpx

from flow_service.config.constants import (
    DEFAULT_FLOW_CATEGORIES,
    FLOW_ASSET_NAME,
    FLOW_ASSET_TYPE,
    FLOW_DETAIL_FIELDS,
    SERVICE_NAME,
    SERVICE_VERSION,
)
from flow_service.config.settings import Settings
from flow_service.exceptions import ConfigurationError, GraphAPIError
from flow_service.utils.logger import get_logger


class GraphAPIClient:
    """Client for the Graph API endpoints used by the flow service."""

    def __init__(
            self,
            base_url: str,
            access_token: Optional[str],
            waba_id: Optional[str] = None,
            phone_number_id: Optional[str] = None,
            timeout_seconds: float = 30.0,
            transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.waba_id = waba_id
        self.phone_number_id = phone_number_id
        self.logger = get_logger(self.__class__.__name__)

        headers = {"User-Agent": f"{SERVICE_NAME}/{SERVICE_VERSION}"}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        self.http_client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=10),
            headers=headers,
            transport=transport
        )

        self.logger.info(
            "Graph API client initialized",
            base_url=base_url,
            waba_id=waba_id,
            phone_number_id=phone_number_id
        )

    @classmethod
    def from_settings(
            cls,
            settings: Settings,
            transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> "GraphAPIClient":
        return cls(
            base_url=settings.graph_api_url,
            access_token=settings.GRAPH_ACCESS_TOKEN,
            waba_id=settings.WABA_ID,
            phone_number_id=settings.BUSINESS_PHONE_NUMBER_ID,
            timeout_seconds=settings.GRAPH_TIMEOUT_SECONDS,
            transport=transport
        )

    async def close(self) -> None:
        await self.http_client.aclose()
        self.logger.info("Graph API client closed")

    # Flows

    async def create_flow(self, name: str, categories: Optional[List[str]] = None) -> Dict[str, Any]:
        """Register a new (draft) flow on the business account."""
        form = {
            "name": name,
            "categories": json.dumps(categories or DEFAULT_FLOW_CATEGORIES),
        }
        return await self._request("POST", f"{self._require_waba_id()}/flows", "create_flow", data=form)

    async def list_flows(self) -> Dict[str, Any]:
        return await self._request("GET", f"{self._require_waba_id()}/flows", "list_flows")

    async def get_flow(self, flow_id: str) -> Dict[str, Any]:
        return await self._request("GET", flow_id, "get_flow", params={"fields": FLOW_DETAIL_FIELDS})

    async def get_flow_preview(self, flow_id: str) -> Dict[str, Any]:
        return await self._request("GET", flow_id, "get_flow_preview", params={"fields": "preview"})

    async def upload_flow_json(self, flow_id: str, content: bytes) -> Dict[str, Any]:
        """Replace the Flow JSON asset of a flow."""
        return await self._request(
            "POST",
            f"{flow_id}/assets",
            "upload_flow_json",
            data={"name": FLOW_ASSET_NAME, "asset_type": FLOW_ASSET_TYPE},
            files={"file": (FLOW_ASSET_NAME, content, "application/json")}
        )

    async def upload_flow_document(self, flow_id: str, document: Dict[str, Any]) -> Dict[str, Any]:
        """Serialize a compiled Flow JSON document and upload it."""
        return await self.upload_flow_json(flow_id, json.dumps(document).encode("utf-8"))

    async def delete_flow(self, flow_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", flow_id, "delete_flow")

    # Messages

    async def send_message(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Send a message from the business phone number."""
        if not self.phone_number_id:
            raise ConfigurationError(
                "Business phone number id is not configured",
                config_key="BUSINESS_PHONE_NUMBER_ID"
            )
        return await self._request("POST", f"{self.phone_number_id}/messages", "send_message", json=payload)

    async def create_message_template(self, template: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"{self._require_waba_id()}/message_templates",
            "create_message_template",
            json=template
        )

    def _require_waba_id(self) -> str:
        if not self.waba_id:
            raise ConfigurationError("WhatsApp business account id is not configured", config_key="WABA_ID")
        return self.waba_id

    async def _request(self, method: str, path: str, operation: str, **kwargs) -> Any:
        self.logger.debug("Graph API request", method=method, path=path, operation=operation)

        try:
            response = await self.http_client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            self.logger.error("Graph API timeout", operation=operation, path=path)
            raise GraphAPIError(
                f"Graph API request timed out: {operation}",
                operation=operation,
                caused_by=e
            )
        except httpx.HTTPError as e:
            self.logger.error("Graph API transport error", operation=operation, path=path, error=str(e))
            raise GraphAPIError(
                f"Graph API request failed: {e}",
                operation=operation,
                caused_by=e
            )

        body = self._parse_body(response)

        if response.is_error:
            self.logger.error(
                "Graph API request failed",
                operation=operation,
                status_code=response.status_code,
                response=body
            )
            raise GraphAPIError.from_response(response.status_code, body, operation=operation)

        self.logger.info("Graph API request completed", operation=operation, status_code=response.status_code)
        return body

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return response.text
