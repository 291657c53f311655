"""
Workspace Repository Implementation
===================================

MongoDB repository for builder workspaces.
"""

from typing import Any, Dict, Iterable, List

from pymongo.errors import PyMongoError

from flow_service.config.constants import WORKSPACES_COLLECTION
from .base_repository import BaseRepository
from .exceptions import RepositoryError, EntityNotFoundError


class WorkspaceRepository(BaseRepository):
    """Repository for workspace documents"""

    collection_name = WORKSPACES_COLLECTION

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a workspace document as received"""
        try:
            async with self._timed_operation("create_workspace"):
                result = await self.collection.insert_one(dict(document))
        except PyMongoError as e:
            self._log_error("create_workspace", e)
            raise RepositoryError(f"Failed to create workspace: {e}", original_error=e)

        self._log_operation("create_workspace", workspace_id=str(result.inserted_id))
        return self.insert_result(result.inserted_id)

    async def get_by_id(self, workspace_id: str) -> Dict[str, Any]:
        """
        Get workspace by ObjectId

        Raises:
            InvalidIdentifierError: If workspace_id is malformed
            EntityNotFoundError: If workspace does not exist
        """
        object_id = self.to_object_id(workspace_id, "workspace")
        try:
            async with self._timed_operation("get_workspace"):
                workspace = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            self._log_error("get_workspace", e, workspace_id=workspace_id)
            raise RepositoryError(f"Failed to fetch workspace: {e}", original_error=e)

        if workspace is None:
            raise EntityNotFoundError("Workspace", workspace_id)
        return workspace

    async def list_by_ids(self, workspace_ids: Iterable[Any]) -> List[Dict[str, Any]]:
        """Fetch every workspace whose id is in ``workspace_ids``"""
        ids = list(workspace_ids)
        if not ids:
            return []
        try:
            async with self._timed_operation("list_workspaces"):
                return await self.collection.find({"_id": {"$in": ids}}).to_list(length=None)
        except PyMongoError as e:
            self._log_error("list_workspaces", e, count=len(ids))
            raise RepositoryError(f"Failed to list workspaces: {e}", original_error=e)
