"""
Shared plumbing for the collection-backed repositories.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, Dict

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
import structlog

from .exceptions import InvalidIdentifierError


class BaseRepository:
    """
    Base class for repositories bound to a single collection.

    Subclasses set ``collection_name``; the collection handle is looked
    up lazily so tests can hand in a mocked database.
    """

    collection_name: str = ""

    def __init__(self, database: AsyncIOMotorDatabase):
        self.database = database
        self.logger = structlog.get_logger(self.__class__.__name__)

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self.database[self.collection_name]

    @staticmethod
    def to_object_id(value: Any, entity_type: str) -> ObjectId:
        """
        Parse an identifier into an ObjectId

        Raises:
            InvalidIdentifierError: If the value is not a valid ObjectId
        """
        if isinstance(value, ObjectId):
            return value
        try:
            return ObjectId(value)
        except (InvalidId, TypeError) as e:
            raise InvalidIdentifierError(entity_type, value) from e

    @staticmethod
    def insert_result(inserted_id: Any) -> Dict[str, Any]:
        return {"acknowledged": True, "insertedId": str(inserted_id)}

    def _log_operation(self, operation: str, **fields) -> None:
        self.logger.debug(
            "Repository operation completed",
            operation=operation,
            collection=self.collection_name,
            **fields
        )

    def _log_error(self, operation: str, error: Exception, **fields) -> None:
        self.logger.error(
            "Repository operation failed",
            operation=operation,
            collection=self.collection_name,
            error=str(error),
            error_type=type(error).__name__,
            **fields
        )

    @asynccontextmanager
    async def _timed_operation(self, operation: str):
        """Log the wall time of the wrapped block in milliseconds"""
        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            yield
        finally:
            self._log_operation(operation, duration_ms=round((loop.time() - started) * 1000, 2))
