"""
Flow Service - FastAPI Application Entry Point.

This module provides the FastAPI application with its middleware, routes,
exception handlers and lifecycle management. The Graph API client, the
MongoDB connection manager and the flow compiler are created in the
lifespan and kept on ``app.state``.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from flow_service.api.v1 import flow_routes, health_routes, message_routes, store_routes
from flow_service.config.constants import API_PREFIX, SERVICE_DESCRIPTION, SERVICE_NAME, SERVICE_VERSION
from flow_service.config.settings import Settings, get_settings
from flow_service.core.channels import GraphAPIClient
from flow_service.core.flows import CompilerOptions, FlowCompiler
from flow_service.database import MongoDBConnectionManager
from flow_service.exceptions import setup_exception_handlers
from flow_service.utils.logger import bind_context, clear_context, get_logger, setup_logging

# Initialize logger
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    settings: Settings = app.state.settings

    logger.info(
        "Starting Flow Service...",
        version=SERVICE_VERSION,
        environment=settings.ENVIRONMENT.value,
        graph_api_url=settings.graph_api_url
    )

    if not settings.GRAPH_ACCESS_TOKEN:
        logger.warning("GRAPH_ACCESS_TOKEN is not set; Graph API calls will be rejected")

    app.state.compiler = FlowCompiler(CompilerOptions.from_settings(settings))
    app.state.graph_client = GraphAPIClient.from_settings(settings)
    app.state.mongo = MongoDBConnectionManager.from_settings(settings)
    app.state.mongo.connect()

    logger.info("Flow Service startup completed")
    try:
        yield
    finally:
        logger.info("Shutting down Flow Service...")
        await app.state.graph_client.close()
        await app.state.mongo.disconnect()
        logger.info("Flow Service shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application instance."""
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL.value, settings.LOG_FORMAT)

    app = FastAPI(
        title="Flow Service API",
        description=SERVICE_DESCRIPTION,
        version=SERVICE_VERSION,
        docs_url=f"{API_PREFIX}/docs",
        openapi_url=f"{API_PREFIX}/openapi.json",
        lifespan=lifespan
    )
    app.state.settings = settings

    setup_middleware(app, settings)
    setup_exception_handlers(app)
    setup_routes(app)

    return app


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure application middleware."""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID", "Accept"],
        expose_headers=["X-Request-ID", "X-Process-Time"]
    )

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id_middleware(request: Request, call_next):
        """Add unique request ID to all requests."""
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        clear_context()
        bind_context(request_id=request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    # Request timing middleware
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(round(process_time * 1000, 2))
        return response


def setup_routes(app: FastAPI) -> None:
    """Setup application routes and endpoints."""
    app.include_router(health_routes.router)
    app.include_router(flow_routes.router, prefix=API_PREFIX)
    app.include_router(message_routes.router, prefix=API_PREFIX)
    app.include_router(store_routes.router, prefix=API_PREFIX)


def main() -> None:
    """Main entry point for running the service."""
    settings = get_settings()

    logger.info(
        f"Starting {SERVICE_NAME} server",
        host=settings.HOST,
        port=settings.PORT,
        environment=settings.ENVIRONMENT.value,
        debug=settings.DEBUG
    )

    uvicorn.run(
        "flow_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.value.lower(),
        reload=settings.is_development() and settings.DEBUG,
        server_header=False
    )


# Create the FastAPI app instance
app = create_app()

if __name__ == "__main__":
    main()
