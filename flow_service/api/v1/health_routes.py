"""
Health Check API Routes
REST API endpoints for service health monitoring and diagnostics.
"""

import time
from datetime import datetime, UTC
from typing import Any, Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from flow_service.config.constants import API_PREFIX, SERVICE_DESCRIPTION, SERVICE_NAME, SERVICE_VERSION
from flow_service.dependencies import MongoManagerDep, SettingsDep

router = APIRouter(tags=["health"])

# Startup time for uptime calculation
SERVICE_START_TIME = time.time()


class HealthStatus(BaseModel):
    """Health status response model"""
    status: str  # healthy, unhealthy
    timestamp: datetime
    version: str
    environment: str
    uptime_seconds: float


@router.get(
    "/health",
    response_model=HealthStatus,
    summary="Basic health check",
    description="Simple health check endpoint for load balancers"
)
async def basic_health_check(settings: SettingsDep) -> HealthStatus:
    return HealthStatus(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=SERVICE_VERSION,
        environment=settings.ENVIRONMENT.value,
        uptime_seconds=time.time() - SERVICE_START_TIME
    )


@router.get(
    "/health/detailed",
    summary="Detailed health check",
    description="Health check including the MongoDB connection"
)
async def detailed_health_check(settings: SettingsDep, mongo: MongoManagerDep) -> JSONResponse:
    """
    Detailed health check

    Returns:
        200 when every dependency is healthy, 503 otherwise
    """
    mongodb = await mongo.health_check()
    healthy = mongodb.get("healthy", False)

    return JSONResponse(
        status_code=200 if healthy else 503,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": SERVICE_VERSION,
            "environment": settings.ENVIRONMENT.value,
            "uptime_seconds": time.time() - SERVICE_START_TIME,
            "dependencies": {
                "mongodb": mongodb,
                "graph_api": {"configured": bool(settings.GRAPH_ACCESS_TOKEN and settings.WABA_ID)},
            },
        }
    )


@router.get("/info", summary="Service information")
async def service_info(settings: SettingsDep) -> Dict[str, Any]:
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "description": SERVICE_DESCRIPTION,
        "environment": settings.ENVIRONMENT.value,
        "api_prefix": API_PREFIX,
        "graph_api_version": settings.GRAPH_API_VERSION,
        "flow_limits": {
            "max_screens": settings.FLOW_MAX_SCREENS,
            "max_components_per_screen": settings.FLOW_MAX_COMPONENTS_PER_SCREEN,
            "enforce_component_limit": settings.FLOW_ENFORCE_COMPONENT_LIMIT,
            "require_component_names": settings.FLOW_REQUIRE_COMPONENT_NAMES,
            "unknown_component_policy": settings.FLOW_UNKNOWN_COMPONENT_POLICY.value,
        },
    }
