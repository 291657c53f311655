"""
Dependency injection for services and repositories

Provides FastAPI dependency providers. Long-lived handles (the Graph API
client, the MongoDB connection manager and the flow compiler) are created
in the application lifespan and stored on ``app.state``; providers read
them from the request's application.
"""

from typing import Annotated

from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from flow_service.config.settings import Settings
from flow_service.core.channels import GraphAPIClient, WhatsAppChannel
from flow_service.core.flows import FlowCompiler
from flow_service.database import MongoDBConnectionManager
from flow_service.repositories import (
    BotRepository,
    SubmissionRepository,
    UserRepository,
    WorkspaceRepository,
)
from flow_service.services import (
    BuilderService,
    FlowOrchestrationService,
    StoreService,
)


# =============================================================================
# Application State Providers
# =============================================================================

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_graph_client(request: Request) -> GraphAPIClient:
    return request.app.state.graph_client


def get_compiler(request: Request) -> FlowCompiler:
    return request.app.state.compiler


def get_mongo_manager(request: Request) -> MongoDBConnectionManager:
    return request.app.state.mongo


def get_database(
        mongo: Annotated[MongoDBConnectionManager, Depends(get_mongo_manager)]
) -> AsyncIOMotorDatabase:
    return mongo.get_database()


def get_mongo_client(
        mongo: Annotated[MongoDBConnectionManager, Depends(get_mongo_manager)]
) -> AsyncIOMotorClient:
    return mongo.get_client()


# =============================================================================
# Repository Dependency Providers
# =============================================================================

def get_user_repository(
        database: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> UserRepository:
    return UserRepository(database)


def get_workspace_repository(
        database: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> WorkspaceRepository:
    return WorkspaceRepository(database)


def get_bot_repository(
        database: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> BotRepository:
    return BotRepository(database)


def get_submission_repository(
        client: Annotated[AsyncIOMotorClient, Depends(get_mongo_client)]
) -> SubmissionRepository:
    return SubmissionRepository(client)


# =============================================================================
# Service Dependency Providers
# =============================================================================

def get_whatsapp_channel(
        graph_client: Annotated[GraphAPIClient, Depends(get_graph_client)]
) -> WhatsAppChannel:
    return WhatsAppChannel(graph_client)


def get_orchestration_service(
        compiler: Annotated[FlowCompiler, Depends(get_compiler)],
        graph_client: Annotated[GraphAPIClient, Depends(get_graph_client)]
) -> FlowOrchestrationService:
    return FlowOrchestrationService(compiler, graph_client)


def get_builder_service(
        bot_repository: Annotated[BotRepository, Depends(get_bot_repository)]
) -> BuilderService:
    return BuilderService(bot_repository)


def get_store_service(
        user_repository: Annotated[UserRepository, Depends(get_user_repository)],
        workspace_repository: Annotated[WorkspaceRepository, Depends(get_workspace_repository)],
        bot_repository: Annotated[BotRepository, Depends(get_bot_repository)]
) -> StoreService:
    return StoreService(user_repository, workspace_repository, bot_repository)


# =============================================================================
# Type Aliases for Route Signatures
# =============================================================================

GraphClientDep = Annotated[GraphAPIClient, Depends(get_graph_client)]
CompilerDep = Annotated[FlowCompiler, Depends(get_compiler)]
MongoManagerDep = Annotated[MongoDBConnectionManager, Depends(get_mongo_manager)]
UserRepositoryDep = Annotated[UserRepository, Depends(get_user_repository)]
WorkspaceRepositoryDep = Annotated[WorkspaceRepository, Depends(get_workspace_repository)]
BotRepositoryDep = Annotated[BotRepository, Depends(get_bot_repository)]
SubmissionRepositoryDep = Annotated[SubmissionRepository, Depends(get_submission_repository)]
WhatsAppChannelDep = Annotated[WhatsAppChannel, Depends(get_whatsapp_channel)]
OrchestrationServiceDep = Annotated[FlowOrchestrationService, Depends(get_orchestration_service)]
BuilderServiceDep = Annotated[BuilderService, Depends(get_builder_service)]
StoreServiceDep = Annotated[StoreService, Depends(get_store_service)]
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
