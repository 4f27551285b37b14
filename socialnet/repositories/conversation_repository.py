import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from socialnet.models.conversation import ConversationDocument
from socialnet.utils.errors import ValidationError


logger = logging.getLogger(__name__)


def pair_key(user_a: str, user_b: str) -> str:
    return ":".join(sorted([user_a, user_b]))


class ConversationRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    @property
    def collection(self):
        return self._db["conversations"]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("pair_key", ASCENDING)], unique=True)
        await self.collection.create_index([("participants", ASCENDING)])
        await self.collection.create_index([("last_message_at", DESCENDING)])

    async def find_between(self, user_a: str, user_b: str) -> Optional[ConversationDocument]:
        doc = await self.collection.find_one({"pair_key": pair_key(user_a, user_b)})
        if doc:
            doc["_id"] = str(doc["_id"])
        return doc

    async def get_or_create_one_to_one(self, sender_id: str, receiver_id: str, text: str) -> Tuple[ConversationDocument, bool]:
        existing = await self.find_between(sender_id, receiver_id)
        if existing:
            return existing, False
        now = datetime.now(timezone.utc)
        doc: ConversationDocument = {
            "participants": [sender_id, receiver_id],
            "pair_key": pair_key(sender_id, receiver_id),
            "last_message": {"text": text, "sender_id": sender_id},
            "created_at": now,
            "last_message_at": now,
        }
        try:
            result = await self.collection.insert_one(doc)
        except DuplicateKeyError:
            # another first-contact send for this pair got there first
            logger.info("Conversation for %s already created concurrently", doc["pair_key"])
            winner = await self.find_between(sender_id, receiver_id)
            if winner is None:
                raise
            return winner, False
        doc["_id"] = str(result.inserted_id)
        return doc, True

    async def update_last_message(self, conversation_id, text: str, sender_id: str) -> None:
        await self.collection.update_one(
            {"_id": self._to_object_id(conversation_id)},
            {
                "$set": {
                    "last_message": {"text": text, "sender_id": sender_id},
                    "last_message_at": datetime.now(timezone.utc),
                },
            },
        )

    async def list_for_user(self, user_id: str, limit: Optional[int] = None, cursor: Optional[str] = None) -> Tuple[List[ConversationDocument], Optional[str]]:
        query: Dict[str, Any] = {"participants": user_id}
        sort = [("last_message_at", DESCENDING), ("_id", DESCENDING)]
        if cursor:
            # Cursor format: timestamp_ms:object_id_hex
            ts, oid = self._parse_cursor(cursor)
            query["$or"] = [
                {"last_message_at": {"$lt": ts}},
                {"last_message_at": ts, "_id": {"$lt": oid}},
            ]

        cursor_db = self.collection.find(query).sort(sort)
        if limit:
            cursor_db = cursor_db.limit(limit)
        items = await cursor_db.to_list(length=limit)
        for it in items:
            it["_id"] = str(it.get("_id"))
        next_cursor = None
        if limit and len(items) == limit:
            last = items[-1]
            last_ts = _to_millis(last["last_message_at"])
            next_cursor = f"{last_ts}:{last['_id']}"
        return items, next_cursor

    def _parse_cursor(self, cursor: str) -> Tuple[datetime, ObjectId]:
        try:
            ts_str, oid_hex = cursor.split(":", 1)
            # stored datetimes are naive UTC
            ts = _EPOCH + timedelta(milliseconds=int(ts_str))
            return ts, ObjectId(oid_hex)
        except (ValueError, OverflowError, InvalidId) as exc:
            raise ValidationError(f"Invalid cursor: {cursor}") from exc

    def _to_object_id(self, value) -> ObjectId:
        return value if isinstance(value, ObjectId) else ObjectId(value)


_EPOCH = datetime(1970, 1, 1)


def _to_millis(value: datetime) -> int:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return (value - _EPOCH) // timedelta(milliseconds=1)
