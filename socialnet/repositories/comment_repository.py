from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from socialnet.models.comment import CommentCreator, CommentDocument


class CommentRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    @property
    def collection(self):
        return self._db["comments"]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("post_id", ASCENDING), ("created_at", DESCENDING)])

    async def create_comment(self, post_id: str, creator: CommentCreator, comment: str) -> CommentDocument:
        doc: CommentDocument = {
            "post_id": post_id,
            "creator": creator,
            "comment": comment,
            "created_at": datetime.now(timezone.utc),
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = str(result.inserted_id)
        return doc

    async def get_comment(self, comment_id: str) -> Optional[CommentDocument]:
        if not ObjectId.is_valid(comment_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(comment_id)})
        if doc:
            doc["_id"] = str(doc["_id"])
        return doc

    async def list_for_post(self, post_id: str) -> List[CommentDocument]:
        cur = self.collection.find({"post_id": post_id}).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        items = await cur.to_list(length=None)
        for it in items:
            it["_id"] = str(it["_id"])
        return items

    async def delete_comment(self, comment_id: str) -> bool:
        result = await self.collection.delete_one({"_id": ObjectId(comment_id)})
        return result.deleted_count > 0

    async def delete_for_post(self, post_id: str) -> int:
        result = await self.collection.delete_many({"post_id": post_id})
        return result.deleted_count
