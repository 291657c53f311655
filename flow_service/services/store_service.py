"""
Store Service

Operations on the builder document store that span several collections:
workspaces created on behalf of a user, workspaces listed by the role a
user holds in them, and the bots a user reaches inside a workspace.
"""

from typing import Any, Dict, List

from flow_service.config.constants import BotRole
from flow_service.repositories import BotRepository, UserRepository, WorkspaceRepository
from flow_service.services.base_service import BaseService


class StoreService(BaseService):
    """Cross-collection queries and writes for users, workspaces and bots"""

    def __init__(
            self,
            user_repository: UserRepository,
            workspace_repository: WorkspaceRepository,
            bot_repository: BotRepository
    ):
        super().__init__()
        self.users = user_repository
        self.workspaces = workspace_repository
        self.bots = bot_repository

    async def create_workspace_for_user(self, user_id: str, workspace_data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a workspace and attach it to the user with no bots yet"""
        # Reject a malformed user id before anything is written
        self.users.to_object_id(user_id, "user")

        created = await self.workspaces.create(workspace_data)
        workspace_id = self.workspaces.to_object_id(created["insertedId"], "workspace")

        modified = await self.users.add_workspace_association(user_id, workspace_id)
        if modified == 0:
            self.logger.warning("Workspace created but no user was updated", user_id=user_id)

        self.log_operation("create_workspace_for_user", user_id=user_id, workspace_id=created["insertedId"])
        return {
            "message": "workspace created and associated with user",
            "workspaceId": created["insertedId"],
        }

    async def list_workspaces_with_role(self, user_id: str, role: BotRole) -> List[Dict[str, Any]]:
        """Workspaces in which the user holds ``role`` on at least one bot"""
        workspace_ids = await self.users.get_workspace_ids_with_role(user_id, role.value)
        if not workspace_ids:
            self.logger.info("No workspaces for role", user_id=user_id, role=role.value)
            return []
        return await self.workspaces.list_by_ids(workspace_ids)

    async def list_workspace_bots(self, user_id: str, workspace_id: str) -> List[Dict[str, Any]]:
        """Name and id of the bots the user is associated with in a workspace"""
        bot_ids = await self.users.get_bot_ids_in_workspace(user_id, workspace_id)
        return await self.bots.list_summaries(bot_ids)
