"""
MongoDB Connection Management
============================

Motor client lifecycle for the bot-builder document store.

The client is created once per application lifespan; Motor connects
lazily on the first operation, so startup does not require a reachable
server. Health is probed with a ping on demand.
"""

import asyncio
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
import structlog

from flow_service.config.settings import Settings

logger = structlog.get_logger(__name__)


class MongoDBConnectionManager:
    """
    Owns the Motor client and the default database handle
    """

    def __init__(
            self,
            uri: str,
            database_name: str,
            server_selection_timeout_ms: int = 5000
    ):
        """
        Initialize connection manager

        Args:
            uri: MongoDB connection string
            database_name: Database holding users, workspaces and bots
            server_selection_timeout_ms: How long operations wait for a server
        """
        self.uri = uri
        self.database_name = database_name
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.client: Optional[AsyncIOMotorClient] = None
        self.database: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoDBConnectionManager":
        return cls(
            uri=settings.MONGODB_URI,
            database_name=settings.MONGODB_DATABASE,
            server_selection_timeout_ms=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS
        )

    def connect(self) -> AsyncIOMotorDatabase:
        """
        Create the client if needed and return the default database

        Returns:
            MongoDB database instance
        """
        if self.client is None:
            logger.info("Creating MongoDB client", database=self.database_name)
            self.client = AsyncIOMotorClient(
                self.uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms
            )
            self.database = self.client[self.database_name]
        return self.database

    def get_client(self) -> AsyncIOMotorClient:
        if self.client is None:
            self.connect()
        return self.client

    def get_database(self) -> AsyncIOMotorDatabase:
        if self.database is None:
            self.connect()
        return self.database

    async def disconnect(self) -> None:
        """Close the client"""
        if self.client is not None:
            self.client.close()
            self.client = None
            self.database = None
            logger.info("Disconnected from MongoDB")

    async def health_check(self) -> Dict[str, Any]:
        """
        Ping the server

        Returns:
            Health status information
        """
        health_info = {
            "connected": False,
            "healthy": False,
            "database": self.database_name,
        }

        if self.client is None:
            health_info["error"] = "client not initialized"
            return health_info

        loop = asyncio.get_running_loop()
        start_time = loop.time()
        try:
            await self.client.admin.command("ping")
        except PyMongoError as e:
            logger.warning("MongoDB health check failed", error=str(e))
            health_info["error"] = str(e)
            return health_info

        health_info.update({
            "connected": True,
            "healthy": True,
            "response_time_ms": round((loop.time() - start_time) * 1000, 2),
        })
        return health_info
