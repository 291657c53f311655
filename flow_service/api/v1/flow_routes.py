"""
Flow API Routes
REST API endpoints for compiling, registering and publishing WhatsApp flows.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, File, UploadFile, status

from flow_service.core.flows import FlowSchema
from flow_service.dependencies import (
    BuilderServiceDep,
    CompilerDep,
    GraphClientDep,
    OrchestrationServiceDep,
)
from flow_service.exceptions import ValidationError
from flow_service.models.schemas import BuilderRequest, CreateFlowRequest, OrchestrateFlowRequest

router = APIRouter(prefix="/flows", tags=["flows"])


@router.post(
    "/generatejson",
    status_code=status.HTTP_200_OK,
    summary="Compile a form schema",
    description="Compile screens and components into a WhatsApp Flow JSON document"
)
async def generate_flow_json(schema: FlowSchema, compiler: CompilerDep) -> Dict[str, Any]:
    """
    Compile a form schema into Flow JSON

    Raises:
        400: Schema violates the compiler's limits or is malformed
    """
    return compiler.compile(schema)


@router.post("/createflow", summary="Register a new flow")
async def create_flow(request: CreateFlowRequest, graph_client: GraphClientDep) -> Any:
    return await graph_client.create_flow(request.name, request.categories)


@router.get("/getflowlist", summary="List the business account's flows")
async def get_flow_list(graph_client: GraphClientDep) -> Any:
    return await graph_client.list_flows()


@router.get("/getflowid/{flow_id}", summary="Get flow details")
async def get_flow(flow_id: str, graph_client: GraphClientDep) -> Any:
    return await graph_client.get_flow(flow_id)


@router.get("/getflowpreview/{flow_id}", summary="Get a flow preview link")
async def get_flow_preview(flow_id: str, graph_client: GraphClientDep) -> Any:
    return await graph_client.get_flow_preview(flow_id)


@router.post("/updateflow/{flow_id}", summary="Upload a Flow JSON file as the flow's asset")
async def update_flow(
        flow_id: str,
        graph_client: GraphClientDep,
        file: Optional[UploadFile] = File(default=None)
) -> Any:
    if file is None:
        raise ValidationError("No file uploaded", field="file")
    content = await file.read()
    return await graph_client.upload_flow_json(flow_id, content)


@router.post("/compile-and-upload/{flow_id}", summary="Compile a schema and upload it as the flow's asset")
async def compile_and_upload(
        flow_id: str,
        schema: FlowSchema,
        orchestration_service: OrchestrationServiceDep
) -> Any:
    return await orchestration_service.compile_and_upload(flow_id, schema)


@router.delete("/deleteflow/{flow_id}", summary="Delete a draft flow")
async def delete_flow(flow_id: str, graph_client: GraphClientDep) -> Any:
    return await graph_client.delete_flow(flow_id)


@router.post(
    "/orchestrate-flow",
    summary="Publish a schema as a draft flow and send it",
    description="Register a flow, upload the compiled schema and send a draft flow message"
)
async def orchestrate_flow(
        request: OrchestrateFlowRequest,
        orchestration_service: OrchestrationServiceDep
) -> Dict[str, Any]:
    return await orchestration_service.orchestrate(
        schema=request.flow_schema,
        flow_name=request.flow_name,
        customer_phone_number=request.customer_phone_number,
        categories=request.categories,
        flow_token=request.flow_token
    )


@router.post("/builder", summary="Form builder data exchange")
async def builder(request: BuilderRequest, builder_service: BuilderServiceDep) -> Dict[str, Any]:
    return await builder_service.handle(request.data)
