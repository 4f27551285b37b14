from datetime import datetime, timezone
from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from socialnet.models.story import StoryDocument


class StoryRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    @property
    def collection(self):
        return self._db["stories"]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("expires_at", ASCENDING)])

    async def create_story(self, user_id: str, text: str, expires_at: datetime) -> StoryDocument:
        doc: StoryDocument = {
            "user_id": user_id,
            "text": text,
            "expires_at": expires_at,
            "created_at": datetime.now(timezone.utc),
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = str(result.inserted_id)
        return doc

    async def list_active(self, now: datetime) -> List[StoryDocument]:
        cur = self.collection.find({"expires_at": {"$gt": _naive_utc(now)}}).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        items = await cur.to_list(length=None)
        for it in items:
            it["_id"] = str(it["_id"])
        return items

    async def delete_expired(self, now: datetime) -> int:
        result = await self.collection.delete_many({"expires_at": {"$lte": _naive_utc(now)}})
        return result.deleted_count


def _naive_utc(value: datetime) -> datetime:
    # stored datetimes are naive UTC
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
