"""
Submission Repository Implementation
====================================

Form submissions are written to caller-chosen databases and
collections (one database per submitter), so this repository works on
the Motor client rather than on a single database.
"""

from typing import Any, Dict, List

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo.errors import PyMongoError
import structlog

from .base_repository import BaseRepository
from .exceptions import RepositoryError


class SubmissionRepository:
    """Repository for dynamically addressed submission collections"""

    def __init__(self, client: AsyncIOMotorClient):
        self.client = client
        self.logger = structlog.get_logger("SubmissionRepository")

    async def create_collection(self, database_name: str, collection_name: str) -> None:
        """Create an empty collection in ``database_name``"""
        try:
            await self.client[database_name].create_collection(collection_name)
        except PyMongoError as e:
            self.logger.error(
                "Failed to create collection",
                database=database_name,
                collection=collection_name,
                error=str(e)
            )
            raise RepositoryError(f"Failed to create collection: {e}", original_error=e)

        self.logger.info("Collection created", database=database_name, collection=collection_name)

    async def insert(self, database_name: str, collection_name: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Store one submitted form"""
        try:
            result = await self.client[database_name][collection_name].insert_one(dict(data))
        except PyMongoError as e:
            self.logger.error(
                "Failed to store submission",
                database=database_name,
                collection=collection_name,
                error=str(e)
            )
            raise RepositoryError(f"Failed to store form data: {e}", original_error=e)

        return BaseRepository.insert_result(result.inserted_id)

    async def find_in_range(
            self,
            database_name: str,
            collection_name: str,
            start_ms: int,
            end_ms: int
    ) -> List[Dict[str, Any]]:
        """
        Submissions whose ``entrydatetime`` lies in [start_ms, end_ms]

        ``entrydatetime`` is stored as a string or number of epoch
        milliseconds, hence the server-side $toLong.
        """
        query = {
            "$expr": {
                "$and": [
                    {"$gte": [{"$toLong": "$entrydatetime"}, start_ms]},
                    {"$lte": [{"$toLong": "$entrydatetime"}, end_ms]},
                ]
            }
        }
        try:
            results = await self.client[database_name][collection_name].find(query).to_list(length=None)
        except PyMongoError as e:
            self.logger.error(
                "Failed to query submissions",
                database=database_name,
                collection=collection_name,
                error=str(e)
            )
            raise RepositoryError(f"Failed to fetch form data: {e}", original_error=e)

        self.logger.debug(
            "Submissions fetched",
            database=database_name,
            collection=collection_name,
            count=len(results)
        )
        return results
