"""
User Repository Implementation
==============================

MongoDB repository for builder users and their workspace/bot associations.

User document shape:
    {
        "_id": ObjectId,
        "phone": str,
        "name": str,
        "workspaceAssociations": [
            {"workspace": ObjectId, "botAssociations": [{"bot": ObjectId | None, "role": str}]}
        ]
    }
"""

from typing import Any, Dict, List

from bson import ObjectId
from pymongo.errors import PyMongoError

from flow_service.config.constants import USERS_COLLECTION
from .base_repository import BaseRepository
from .exceptions import RepositoryError, EntityNotFoundError


class UserRepository(BaseRepository):
    """Repository for user documents"""

    collection_name = USERS_COLLECTION

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a user document as received"""
        try:
            async with self._timed_operation("create_user"):
                result = await self.collection.insert_one(dict(document))
                return self.insert_result(result.inserted_id)
        except PyMongoError as e:
            self._log_error("create_user", e)
            raise RepositoryError(f"Failed to create user: {e}", original_error=e)

    async def create_with_associations(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a user whose workspace and bot references arrive as strings

        Args:
            document: User payload with string ids inside workspaceAssociations

        Returns:
            Insert result with the new user id

        Raises:
            InvalidIdentifierError: If any referenced id is malformed
        """
        user = dict(document)
        user["workspaceAssociations"] = [
            {
                "workspace": self.to_object_id(association.get("workspace"), "workspace"),
                "botAssociations": [
                    {
                        "bot": self.to_object_id(bot_association["bot"], "bot") if bot_association.get("bot") else None,
                        "role": bot_association.get("role"),
                    }
                    for bot_association in association.get("botAssociations", [])
                ],
            }
            for association in document.get("workspaceAssociations", [])
        ]
        return await self.create(user)

    async def get_by_phone(self, phone: str) -> Dict[str, Any]:
        """
        Get user by phone number

        Raises:
            EntityNotFoundError: If no user has this phone number
        """
        try:
            async with self._timed_operation("get_user_by_phone"):
                user = await self.collection.find_one({"phone": phone})
        except PyMongoError as e:
            self._log_error("get_user_by_phone", e, phone=phone)
            raise RepositoryError(f"Failed to fetch user: {e}", original_error=e)

        if user is None:
            raise EntityNotFoundError("User", phone, {"phone": phone})
        return user

    async def get_by_id(self, user_id: str) -> Dict[str, Any]:
        """
        Get user by ObjectId

        Raises:
            InvalidIdentifierError: If user_id is malformed
            EntityNotFoundError: If user does not exist
        """
        object_id = self.to_object_id(user_id, "user")
        try:
            async with self._timed_operation("get_user"):
                user = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            self._log_error("get_user", e, user_id=user_id)
            raise RepositoryError(f"Failed to fetch user: {e}", original_error=e)

        if user is None:
            raise EntityNotFoundError("User", user_id)
        return user

    async def associate_bot(self, user_id: str, workspace_id: str, bot_id: str, role: str) -> None:
        """
        Grant a user a role on a bot inside a workspace

        Appends to the existing workspace association when the user already
        belongs to the workspace, otherwise adds a new association.
        """
        user = await self.get_by_id(user_id)
        workspace_object_id = self.to_object_id(workspace_id, "workspace")
        bot_association = {"bot": self.to_object_id(bot_id, "bot"), "role": role}

        workspace_index = self._find_workspace_index(user.get("workspaceAssociations", []), workspace_object_id)

        if workspace_index == -1:
            update = {
                "$push": {
                    "workspaceAssociations": {
                        "workspace": workspace_object_id,
                        "botAssociations": [bot_association],
                    }
                }
            }
        else:
            update = {"$push": {f"workspaceAssociations.{workspace_index}.botAssociations": bot_association}}

        try:
            async with self._timed_operation("associate_bot"):
                await self.collection.update_one({"_id": user["_id"]}, update)
        except PyMongoError as e:
            self._log_error("associate_bot", e, user_id=user_id, workspace_id=workspace_id)
            raise RepositoryError(f"Failed to associate bot: {e}", original_error=e)

        self._log_operation(
            "associate_bot",
            user_id=user_id,
            workspace_id=workspace_id,
            bot_id=bot_id,
            new_workspace=workspace_index == -1
        )

    async def add_workspace_association(self, user_id: str, workspace_id: ObjectId) -> int:
        """Attach an empty workspace association to a user; returns modified count"""
        object_id = self.to_object_id(user_id, "user")
        try:
            async with self._timed_operation("add_workspace_association"):
                result = await self.collection.update_one(
                    {"_id": object_id},
                    {"$push": {"workspaceAssociations": {"workspace": workspace_id, "botAssociations": []}}}
                )
                return result.modified_count
        except PyMongoError as e:
            self._log_error("add_workspace_association", e, user_id=user_id)
            raise RepositoryError(f"Failed to associate workspace: {e}", original_error=e)

    async def get_workspace_ids_with_role(self, user_id: str, role: str) -> List[Any]:
        """Workspace ids where the user holds ``role`` on at least one bot"""
        user = await self.get_by_id(user_id)
        return [
            association["workspace"]
            for association in user.get("workspaceAssociations", [])
            if any(bot.get("role") == role for bot in association.get("botAssociations", []))
        ]

    async def get_bot_ids_in_workspace(self, user_id: str, workspace_id: str) -> List[ObjectId]:
        """
        Bot ids the user is associated with inside one workspace

        Raises:
            EntityNotFoundError: If the user is not part of the workspace
        """
        user_object_id = self.to_object_id(user_id, "user")
        workspace_object_id = self.to_object_id(workspace_id, "workspace")
        try:
            async with self._timed_operation("get_bot_ids_in_workspace"):
                user = await self.collection.find_one(
                    {"_id": user_object_id, "workspaceAssociations.workspace": workspace_object_id},
                    projection={"workspaceAssociations.$": 1}
                )
        except PyMongoError as e:
            self._log_error("get_bot_ids_in_workspace", e, user_id=user_id, workspace_id=workspace_id)
            raise RepositoryError(f"Failed to fetch workspace bots: {e}", original_error=e)

        if not user or not user.get("workspaceAssociations"):
            raise EntityNotFoundError("User or workspace association", user_id, {"workspace": workspace_id})

        return [
            association["bot"]
            for association in user["workspaceAssociations"][0].get("botAssociations", [])
            if association.get("bot") is not None
        ]

    @staticmethod
    def _find_workspace_index(associations: List[Dict[str, Any]], workspace_id: ObjectId) -> int:
        # Older documents stored workspace ids as plain strings
        for index, association in enumerate(associations):
            workspace = association.get("workspace")
            if isinstance(workspace, ObjectId) and workspace == workspace_id:
                return index
            if isinstance(workspace, str) and workspace == str(workspace_id):
                return index
        return -1
