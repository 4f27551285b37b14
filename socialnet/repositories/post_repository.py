from datetime import datetime, timezone
from typing import Iterable, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from socialnet.models.post import PostDocument


class PostRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db

    @property
    def collection(self):
        return self._db["posts"]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("creator_id", ASCENDING), ("created_at", DESCENDING)])
        await self.collection.create_index([("created_at", DESCENDING)])

    async def create_post(self, creator_id: str, body: str, image: Optional[str]) -> PostDocument:
        now = datetime.now(timezone.utc)
        doc: PostDocument = {
            "creator_id": creator_id,
            "body": body,
            "image": image,
            "likes": [],
            "comment_count": 0,
            "created_at": now,
            "updated_at": now,
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = str(result.inserted_id)
        return doc

    async def get_post(self, post_id: str) -> Optional[PostDocument]:
        if not ObjectId.is_valid(post_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(post_id)})
        if doc:
            doc["_id"] = str(doc["_id"])
        return doc

    async def list_posts(self, creator_ids: Optional[Iterable[str]] = None, post_ids: Optional[Iterable[str]] = None) -> List[PostDocument]:
        """Newest first; ``creator_ids`` / ``post_ids`` narrow the result when given."""
        query = {}
        if creator_ids is not None:
            query["creator_id"] = {"$in": list(creator_ids)}
        if post_ids is not None:
            query["_id"] = {"$in": [ObjectId(p) for p in post_ids if ObjectId.is_valid(p)]}
        cur = self.collection.find(query).sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        items = await cur.to_list(length=None)
        for it in items:
            it["_id"] = str(it["_id"])
        return items

    async def update_body(self, post_id: str, body: str) -> Optional[PostDocument]:
        await self.collection.update_one(
            {"_id": ObjectId(post_id)},
            {"$set": {"body": body, "updated_at": datetime.now(timezone.utc)}},
        )
        return await self.get_post(post_id)

    async def delete_post(self, post_id: str) -> bool:
        result = await self.collection.delete_one({"_id": ObjectId(post_id)})
        return result.deleted_count > 0

    async def add_like(self, post_id: str, user_id: str) -> Optional[PostDocument]:
        await self.collection.update_one({"_id": ObjectId(post_id)}, {"$addToSet": {"likes": user_id}})
        return await self.get_post(post_id)

    async def remove_like(self, post_id: str, user_id: str) -> Optional[PostDocument]:
        await self.collection.update_one({"_id": ObjectId(post_id)}, {"$pull": {"likes": user_id}})
        return await self.get_post(post_id)

    async def change_comment_count(self, post_id: str, delta: int) -> None:
        await self.collection.update_one({"_id": ObjectId(post_id)}, {"$inc": {"comment_count": delta}})
