"""
Flow Orchestration Service

Compiles builder schemas and publishes them to WhatsApp: registering the
flow, uploading its Flow JSON asset and sending a draft flow message to
a tester.
"""

from typing import Any, Dict, List, Optional

from flow_service.core.channels import GraphAPIClient, WhatsAppChannel
from flow_service.core.flows import CompiledDocument, FlowCompiler, FlowSchema
from flow_service.exceptions import GraphAPIError
from flow_service.services.base_service import BaseService


class FlowOrchestrationService(BaseService):
    """Compile → register → upload → send pipeline"""

    def __init__(self, compiler: FlowCompiler, graph_client: GraphAPIClient):
        super().__init__()
        self.compiler = compiler
        self.graph_client = graph_client
        self.channel = WhatsAppChannel(graph_client)

    def compile(self, schema: FlowSchema) -> CompiledDocument:
        return self.compiler.compile(schema)

    async def compile_and_upload(self, flow_id: str, schema: FlowSchema) -> Dict[str, Any]:
        """
        Compile a schema and make it the Flow JSON asset of an existing flow

        Returns:
            Graph API upload response (includes validation_errors)
        """
        document = self.compiler.compile(schema)
        response = await self.graph_client.upload_flow_document(flow_id, document)
        self.log_operation(
            "compile_and_upload",
            flow_id=flow_id,
            screen_count=len(schema.screens),
            validation_errors=len(response.get("validation_errors", [])) if isinstance(response, dict) else None
        )
        return response

    async def orchestrate(
            self,
            schema: FlowSchema,
            flow_name: str,
            customer_phone_number: str,
            categories: Optional[List[str]] = None,
            flow_token: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Publish a schema as a new draft flow and send it to a phone number

        The schema is compiled before anything is created on the platform,
        so compilation errors leave no orphaned flow behind.
        """
        document = self.compiler.compile(schema)

        created = await self.graph_client.create_flow(flow_name, categories)
        flow_id = created.get("id") if isinstance(created, dict) else None
        if not flow_id:
            raise GraphAPIError(
                "Flow creation response did not contain a flow id",
                response_body=created,
                operation="create_flow"
            )

        upload = await self.graph_client.upload_flow_document(flow_id, document)

        entry_screen = schema.screens[0].id
        message = await self.channel.send_draft_flow(
            to=customer_phone_number,
            flow_id=flow_id,
            screen_id=entry_screen,
            flow_token=flow_token
        )

        self.log_operation(
            "orchestrate_flow",
            flow_id=flow_id,
            flow_name=flow_name,
            entry_screen=entry_screen
        )

        return {"flowId": flow_id, "asset": upload, "message": message}
