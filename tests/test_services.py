"""Unit tests for the builder, store and orchestration services."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId

from flow_service.config.constants import BotRole
from flow_service.core.flows import FlowSchema
from flow_service.exceptions import GraphAPIError, ValidationError
from flow_service.repositories import BotRepository, InvalidIdentifierError, UserRepository, WorkspaceRepository
from flow_service.services import BuilderService, FlowOrchestrationService, StoreService
from flow_service.services.builder_service import COMPONENT_BUILDERS


def _bot_repository(screens=None):
    repository = MagicMock(spec=BotRepository)
    repository.get_by_id = AsyncMock(return_value={"_id": ObjectId(), "screens": screens})
    repository.set_screens = AsyncMock(return_value=None)
    return repository


def _builder_data(**fields):
    data = {"type": "add_component", "botId": str(ObjectId()), "screen_name": "DETAILS"}
    data.update(fields)
    return data


class TestComponentBuilders:
    def test_basic_text_defaults_to_body(self):
        component = COMPONENT_BUILDERS["basic_text"]({"basic_text_body": "Welcome"})
        assert component.type == "text"
        assert component.text == "Welcome"

    def test_basic_text_with_heading_style(self):
        component = COMPONENT_BUILDERS["basic_text"]({"text_type_dropdown": "heading", "basic_text_body": "Hi"})
        assert component.type == "heading"

    def test_checkbox_splits_options(self):
        component = COMPONENT_BUILDERS["checkbox"]({
            "checkbox_field_name": "Topics",
            "checkbox_options": "News, Sport ,, Weather",
        })
        assert component.name == "Topics"
        assert component.label == "Topics"
        assert component.options == ["News", "Sport", "Weather"]

    def test_photo_picker_reads_limits(self):
        component = COMPONENT_BUILDERS["image-upload"]({
            "photo_picker_field_name": "Receipt",
            "photo_source": "camera",
            "photo_picker_max_uploads": "3",
        })
        assert component.type == "photo_picker"
        assert component.source == "camera"
        assert component.uploads == 3

    def test_non_numeric_upload_limit(self):
        with pytest.raises(ValidationError):
            COMPONENT_BUILDERS["document-picker"]({
                "document_picker_field_name": "Contract",
                "document_picker_max_uploads": "many",
            })

    def test_named_component_requires_name(self):
        with pytest.raises(ValidationError):
            COMPONENT_BUILDERS["dropdown"]({"drop_down_options": "a,b"})


class TestBuilderService:
    @pytest.mark.asyncio
    async def test_appends_to_existing_screen(self):
        screens = [{"id": "DETAILS", "title": "Details", "components": [{"type": "text", "text": "Hi"}]}]
        repository = _bot_repository(screens)
        service = BuilderService(repository)

        result = await service.handle(_builder_data(component="date-picker", date_picker_field_name="Birthday"))

        stored = repository.set_screens.call_args.args[1]
        assert len(stored) == 1
        assert stored[0]["components"][-1]["type"] == "date_picker"
        assert result["data"]["data"]["screens"] == [
            {"id": "create_screen", "title": "Create Screen"},
            {"id": "DETAILS", "title": "Details"},
        ]

    @pytest.mark.asyncio
    async def test_creates_missing_screen(self):
        repository = _bot_repository(None)
        service = BuilderService(repository)

        await service.handle(_builder_data(component="basic_text", basic_text_body="Hello"))

        stored = repository.set_screens.call_args.args[1]
        assert stored == [{
            "id": "DETAILS",
            "title": "DETAILS",
            "components": [{"type": "text", "text": "Hello", "required": False}],
        }]

    @pytest.mark.asyncio
    async def test_missing_fields(self):
        service = BuilderService(_bot_repository())

        with pytest.raises(ValidationError) as exc_info:
            await service.handle({"type": "add_component", "botId": "b1"})

        assert exc_info.value.details["missing_fields"] == ["screen_name", "component"]

    @pytest.mark.asyncio
    async def test_unknown_component(self):
        repository = _bot_repository()
        service = BuilderService(repository)

        with pytest.raises(ValidationError):
            await service.handle(_builder_data(component="carousel"))

        repository.get_by_id.assert_not_called()


class TestStoreService:
    def _service(self):
        users = MagicMock(spec=UserRepository)
        users.to_object_id = UserRepository.to_object_id
        workspaces = MagicMock(spec=WorkspaceRepository)
        workspaces.to_object_id = WorkspaceRepository.to_object_id
        bots = MagicMock(spec=BotRepository)
        return StoreService(users, workspaces, bots), users, workspaces, bots

    @pytest.mark.asyncio
    async def test_create_workspace_links_new_id(self):
        service, users, workspaces, _ = self._service()
        user_id = str(ObjectId())
        workspace_id = ObjectId()
        workspaces.create = AsyncMock(return_value={"acknowledged": True, "insertedId": str(workspace_id)})
        users.add_workspace_association = AsyncMock(return_value=1)

        result = await service.create_workspace_for_user(user_id, {"name": "Ops"})

        assert result["workspaceId"] == str(workspace_id)
        users.add_workspace_association.assert_awaited_once_with(user_id, workspace_id)

    @pytest.mark.asyncio
    async def test_create_workspace_rejects_bad_user_id_first(self):
        service, _, workspaces, _ = self._service()
        workspaces.create = AsyncMock()

        with pytest.raises(InvalidIdentifierError):
            await service.create_workspace_for_user("not-an-id", {"name": "Ops"})

        workspaces.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_list_workspaces_with_role(self):
        service, users, workspaces, _ = self._service()
        users.get_workspace_ids_with_role = AsyncMock(return_value=["w1"])
        workspaces.list_by_ids = AsyncMock(return_value=[{"_id": "w1"}])

        assert await service.list_workspaces_with_role("u1", BotRole.USER) == [{"_id": "w1"}]
        users.get_workspace_ids_with_role.assert_awaited_once_with("u1", "user")


class TestOrchestrationService:
    @pytest.mark.asyncio
    async def test_orchestrate_uses_first_screen(self, compiler):
        graph_client = MagicMock()
        graph_client.create_flow = AsyncMock(return_value={"id": "flow-1"})
        graph_client.upload_flow_document = AsyncMock(return_value={"success": True})
        graph_client.send_message = AsyncMock(return_value={"messages": []})
        service = FlowOrchestrationService(compiler, graph_client)
        schema = FlowSchema.model_validate({"screens": [
            {"id": "WELCOME", "title": "Welcome", "components": []},
            {"id": "END", "title": "End", "components": []},
        ]})

        result = await service.orchestrate(schema, "Survey", "15550001111", categories=["SURVEY"], flow_token="t")

        assert result["flowId"] == "flow-1"
        graph_client.create_flow.assert_awaited_once_with("Survey", ["SURVEY"])
        uploaded = graph_client.upload_flow_document.call_args.args[1]
        assert [screen["id"] for screen in uploaded["screens"]] == ["WELCOME", "END"]
        message = graph_client.send_message.call_args.args[0]
        parameters = message["interactive"]["action"]["parameters"]
        assert parameters["flow_action_payload"] == {"screen": "WELCOME"}
        assert parameters["flow_token"] == "t"

    @pytest.mark.asyncio
    async def test_orchestrate_requires_flow_id(self, compiler):
        graph_client = MagicMock()
        graph_client.create_flow = AsyncMock(return_value={})
        graph_client.upload_flow_document = AsyncMock()
        service = FlowOrchestrationService(compiler, graph_client)
        schema = FlowSchema.model_validate({"screens": [{"id": "A", "title": "A"}]})

        with pytest.raises(GraphAPIError):
            await service.orchestrate(schema, "Survey", "15550001111")

        graph_client.upload_flow_document.assert_not_called()
