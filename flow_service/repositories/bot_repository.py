"""
Bot Repository Implementation
=============================

MongoDB repository for bots. A bot keeps its flow definition in the
pre-compiled screen/component form next to the id of the WhatsApp flow
it was published as.

Bot document shape:
    {
        "_id": ObjectId,
        "name": str,
        "users": [{"userId": str, "name": str, "role": str}],
        "screens": [{"id": str, "title": str, "components": [...]}],
        "botinfo": Any,
        "userId": str,
        "flowIdog": str,
        "flowId": str
    }
"""

from typing import Any, Dict, Iterable, List, Optional

from pymongo.errors import PyMongoError

from flow_service.config.constants import BOTS_COLLECTION
from .base_repository import BaseRepository
from .exceptions import RepositoryError, EntityNotFoundError


class BotRepository(BaseRepository):
    """Repository for bot documents"""

    collection_name = BOTS_COLLECTION

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a bot document as received"""
        try:
            async with self._timed_operation("create_bot"):
                result = await self.collection.insert_one(dict(document))
        except PyMongoError as e:
            self._log_error("create_bot", e)
            raise RepositoryError(f"Failed to create bot: {e}", original_error=e)

        self._log_operation("create_bot", bot_id=str(result.inserted_id))
        return self.insert_result(result.inserted_id)

    async def get_by_id(self, bot_id: str) -> Dict[str, Any]:
        """
        Get bot by ObjectId

        Raises:
            InvalidIdentifierError: If bot_id is malformed
            EntityNotFoundError: If bot does not exist
        """
        object_id = self.to_object_id(bot_id, "bot")
        try:
            async with self._timed_operation("get_bot"):
                bot = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            self._log_error("get_bot", e, bot_id=bot_id)
            raise RepositoryError(f"Failed to fetch bot: {e}", original_error=e)

        if bot is None:
            raise EntityNotFoundError("Bot", bot_id)
        return bot

    async def add_user(self, bot_id: str, user_id: str, name: str, role: str) -> Optional[str]:
        """
        Add a user entry to a bot, creating the bot when it does not exist

        Returns:
            "updated" when an existing bot matched, "created" when the
            upsert created it, None when nothing was written
        """
        object_id = self.to_object_id(bot_id, "bot")
        try:
            async with self._timed_operation("add_bot_user"):
                result = await self.collection.update_one(
                    {"_id": object_id},
                    {"$push": {"users": {"userId": user_id, "name": name, "role": role}}},
                    upsert=True
                )
        except PyMongoError as e:
            self._log_error("add_bot_user", e, bot_id=bot_id)
            raise RepositoryError(f"Failed to add user to bot: {e}", original_error=e)

        if result.matched_count > 0:
            return "updated"
        if result.upserted_id is not None:
            return "created"
        return None

    async def update_flow_data(
            self,
            bot_id: str,
            screens: List[Dict[str, Any]],
            botinfo: Any = None,
            user_id: Optional[str] = None,
            flow_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Store the flow definition of a bot (upsert)

        Returns:
            Counters of the write: matched, modified and whether a bot was created
        """
        object_id = self.to_object_id(bot_id, "bot")
        try:
            async with self._timed_operation("update_bot_flow_data"):
                result = await self.collection.update_one(
                    {"_id": object_id},
                    {
                        "$set": {
                            "botinfo": botinfo,
                            "screens": screens,
                            "userId": user_id,
                            "flowIdog": flow_id,
                        }
                    },
                    upsert=True
                )
        except PyMongoError as e:
            self._log_error("update_bot_flow_data", e, bot_id=bot_id)
            raise RepositoryError(f"Failed to update bot: {e}", original_error=e)

        return {
            "matchedCount": result.matched_count,
            "modifiedCount": result.modified_count,
            "upsertedId": str(result.upserted_id) if result.upserted_id is not None else None,
        }

    async def set_screens(self, bot_id: str, screens: List[Dict[str, Any]]) -> None:
        """Replace the stored screens of an existing bot"""
        object_id = self.to_object_id(bot_id, "bot")
        try:
            async with self._timed_operation("set_bot_screens"):
                result = await self.collection.update_one({"_id": object_id}, {"$set": {"screens": screens}})
        except PyMongoError as e:
            self._log_error("set_bot_screens", e, bot_id=bot_id)
            raise RepositoryError(f"Failed to update bot screens: {e}", original_error=e)

        if result.matched_count == 0:
            raise EntityNotFoundError("Bot", bot_id)

    async def list_summaries(self, bot_ids: Iterable[Any]) -> List[Dict[str, Any]]:
        """Name and id of every bot in ``bot_ids``"""
        ids = list(bot_ids)
        if not ids:
            return []
        try:
            async with self._timed_operation("list_bots"):
                bots = await self.collection.find({"_id": {"$in": ids}}).to_list(length=None)
        except PyMongoError as e:
            self._log_error("list_bots", e, count=len(ids))
            raise RepositoryError(f"Failed to list bots: {e}", original_error=e)

        return [{"name": bot.get("name"), "uuid": str(bot["_id"])} for bot in bots]
