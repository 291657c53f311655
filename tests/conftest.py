"""Shared test fixtures and helpers."""

import json
from typing import Any, Dict, List, Tuple
from unittest.mock import MagicMock

import httpx
import pytest
from fastapi.testclient import TestClient

from flow_service.config.settings import Environment, Settings
from flow_service.core.channels import GraphAPIClient
from flow_service.core.flows import CompilerOptions, FlowCompiler
from flow_service.database import MongoDBConnectionManager
from flow_service.dependencies import (
    get_bot_repository,
    get_graph_client,
    get_mongo_manager,
    get_submission_repository,
    get_user_repository,
    get_workspace_repository,
)
from flow_service.main import create_app
from flow_service.repositories import (
    BotRepository,
    SubmissionRepository,
    UserRepository,
    WorkspaceRepository,
)

GRAPH_API_ROOT = "/v20.0/"


class GraphRecorder:
    """
    MockTransport handler standing in for the Graph API.

    Responses are registered per (method, path) where path is relative to
    the versioned API root; unregistered calls answer ``{"success": true}``.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}

    def respond(self, method: str, path: str, status_code: int = 200, body: Any = None) -> None:
        self.routes[(method, path)] = (status_code, body)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(GRAPH_API_ROOT):
            path = path[len(GRAPH_API_ROOT):]
        status_code, body = self.routes.get((request.method, path), (200, {"success": True}))
        if isinstance(body, (dict, list)):
            return httpx.Response(status_code, json=body)
        return httpx.Response(status_code, text=body or "")

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.last.content)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENVIRONMENT=Environment.TESTING,
        LOG_FORMAT="text",
        GRAPH_ACCESS_TOKEN="test-token",
        WABA_ID="waba-1",
        BUSINESS_PHONE_NUMBER_ID="phone-1",
    )


@pytest.fixture
def graph() -> GraphRecorder:
    return GraphRecorder()


@pytest.fixture
def graph_client(settings, graph) -> GraphAPIClient:
    return GraphAPIClient.from_settings(settings, transport=httpx.MockTransport(graph))


@pytest.fixture
def compiler() -> FlowCompiler:
    return FlowCompiler(CompilerOptions())


@pytest.fixture
def user_repository():
    return MagicMock(spec=UserRepository)


@pytest.fixture
def workspace_repository():
    return MagicMock(spec=WorkspaceRepository)


@pytest.fixture
def bot_repository():
    return MagicMock(spec=BotRepository)


@pytest.fixture
def submission_repository():
    return MagicMock(spec=SubmissionRepository)


@pytest.fixture
def mongo_manager():
    return MagicMock(spec=MongoDBConnectionManager)


@pytest.fixture
def app(
        settings,
        graph_client,
        user_repository,
        workspace_repository,
        bot_repository,
        submission_repository,
        mongo_manager
):
    app = create_app(settings=settings)
    app.state.compiler = FlowCompiler(CompilerOptions.from_settings(settings))
    app.dependency_overrides[get_graph_client] = lambda: graph_client
    app.dependency_overrides[get_mongo_manager] = lambda: mongo_manager
    app.dependency_overrides[get_user_repository] = lambda: user_repository
    app.dependency_overrides[get_workspace_repository] = lambda: workspace_repository
    app.dependency_overrides[get_bot_repository] = lambda: bot_repository
    app.dependency_overrides[get_submission_repository] = lambda: submission_repository
    return app


@pytest.fixture
def client(app):
    return TestClient(app, raise_server_exceptions=False)
