from datetime import datetime, timezone
from typing import Any, Dict, List

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from socialnet.models.message import MessageDocument


class MessageRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    @property
    def collection(self):
        return self._db["messages"]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("conversation_id", ASCENDING), ("created_at", ASCENDING)])

    async def save_message(self, conversation_id, sender_id: str, text: str) -> MessageDocument:
        doc: Dict[str, Any] = {
            "conversation_id": self._to_object_id(conversation_id),
            "sender_id": sender_id,
            "text": text,
            "created_at": datetime.now(timezone.utc),
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = str(result.inserted_id)
        doc["conversation_id"] = str(doc["conversation_id"])
        return doc

    async def get_messages_by_conversation(self, conversation_id) -> List[MessageDocument]:
        query = {"conversation_id": self._to_object_id(conversation_id)}
        # _id breaks ties between messages stored within the same millisecond
        cur = self.collection.find(query).sort([("created_at", ASCENDING), ("_id", ASCENDING)])
        items = await cur.to_list(length=None)
        for it in items:
            it["_id"] = str(it.get("_id"))
            it["conversation_id"] = str(it.get("conversation_id"))
        return items

    def _to_object_id(self, value) -> ObjectId:
        return value if isinstance(value, ObjectId) else ObjectId(value)
