from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from socialnet.models.user import UserDocument


PUBLIC_FIELDS = {"full_name": 1, "profile_photo": 1, "bio": 1, "followers": 1, "following": 1}


class UserRepository:

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db.get_collection("users")

    async def ensure_indexes(self) -> None:
        await self._collection.create_index([("email", ASCENDING)], unique=True)

    async def create_user(self, full_name: str, email: str, hashed_password: str, profile_photo: Optional[str], bio: Optional[str]) -> str:

        doc = {
            "full_name": full_name,
            "email": email,
            "hashed_password": hashed_password,
            "profile_photo": profile_photo,
            "bio": bio,
            "followers": [],
            "following": [],
            "bookmarks": [],
            "created_at": datetime.now(timezone.utc),
        }
        result = await self._collection.insert_one(doc)
        return str(result.inserted_id)

    async def get_user_by_email(self, email: str) -> Optional[UserDocument]:

        user = await self._collection.find_one({"email": email})
        if user:
            user["_id"] = str(user["_id"])  # normalize to string for API layer
        return user

    async def get_user_by_id(self, user_id: str) -> Optional[UserDocument]:
        if not ObjectId.is_valid(user_id):
            return None
        user = await self._collection.find_one({"_id": ObjectId(user_id)})
        if user:
            user["_id"] = str(user["_id"])
        return user

    async def list_users(self, exclude_ids: Iterable[str] = ()) -> List[UserDocument]:
        query: Dict[str, Any] = {}
        excluded = [ObjectId(u) for u in exclude_ids if ObjectId.is_valid(u)]
        if excluded:
            query["_id"] = {"$nin": excluded}
        cursor = self._collection.find(query, PUBLIC_FIELDS).sort("created_at", DESCENDING)
        users = await cursor.to_list(length=None)
        for u in users:
            u["_id"] = str(u["_id"])
        return users

    async def get_public_profiles(self, user_ids: Iterable[str]) -> Dict[str, UserDocument]:
        oids = [ObjectId(u) for u in set(user_ids) if ObjectId.is_valid(u)]
        if not oids:
            return {}
        cursor = self._collection.find({"_id": {"$in": oids}}, PUBLIC_FIELDS)
        profiles: Dict[str, UserDocument] = {}
        async for doc in cursor:
            doc["_id"] = str(doc["_id"])
            profiles[doc["_id"]] = doc
        return profiles

    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> Optional[UserDocument]:
        if fields:
            await self._collection.update_one({"_id": ObjectId(user_id)}, {"$set": fields})
        return await self.get_user_by_id(user_id)

    async def follow(self, follower_id: str, target_id: str) -> None:
        # $addToSet keeps both lists free of duplicates
        await self._collection.update_one({"_id": ObjectId(target_id)}, {"$addToSet": {"followers": follower_id}})
        await self._collection.update_one({"_id": ObjectId(follower_id)}, {"$addToSet": {"following": target_id}})

    async def unfollow(self, follower_id: str, target_id: str) -> None:
        await self._collection.update_one({"_id": ObjectId(target_id)}, {"$pull": {"followers": follower_id}})
        await self._collection.update_one({"_id": ObjectId(follower_id)}, {"$pull": {"following": target_id}})

    async def add_bookmark(self, user_id: str, post_id: str) -> None:
        await self._collection.update_one({"_id": ObjectId(user_id)}, {"$addToSet": {"bookmarks": post_id}})

    async def remove_bookmark(self, user_id: str, post_id: str) -> None:
        await self._collection.update_one({"_id": ObjectId(user_id)}, {"$pull": {"bookmarks": post_id}})

    async def remove_bookmark_everywhere(self, post_id: str) -> None:
        await self._collection.update_many({"bookmarks": post_id}, {"$pull": {"bookmarks": post_id}})
