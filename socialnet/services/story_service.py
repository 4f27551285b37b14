import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from socialnet.repositories.story_repository import StoryRepository
from socialnet.repositories.user_repository import UserRepository
from socialnet.schemas.story import StoryPublic
from socialnet.services.user_service import to_public
from socialnet.utils.dates import as_utc
from socialnet.utils.errors import ValidationError


logger = logging.getLogger(__name__)


class StoryService:
    """Text stories that disappear ``ttl_seconds`` after they are posted."""

    def __init__(self, story_repo: StoryRepository, user_repo: UserRepository, ttl_seconds: int) -> None:
        self._story_repo = story_repo
        self._user_repo = user_repo
        self._ttl = timedelta(seconds=ttl_seconds)

    async def create_story(self, user_id: str, text: str) -> StoryPublic:
        if not text or not text.strip():
            raise ValidationError("Story must have text")
        expires_at = datetime.now(timezone.utc) + self._ttl
        doc = await self._story_repo.create_story(user_id, text.strip(), expires_at)
        stories = await self._with_authors([doc])
        return stories[0]

    async def list_active(self) -> List[StoryPublic]:
        """Expired stories are swept before the read, newest first."""
        await self.clean_expired()
        docs = await self._story_repo.list_active(datetime.now(timezone.utc))
        return await self._with_authors(docs)

    async def clean_expired(self) -> int:
        removed = await self._story_repo.delete_expired(datetime.now(timezone.utc))
        if removed:
            logger.info("Cleaned %d expired stories", removed)
        return removed

    async def _with_authors(self, docs: List[Dict[str, Any]]) -> List[StoryPublic]:
        profiles = await self._user_repo.get_public_profiles(d["user_id"] for d in docs)
        out = []
        for d in docs:
            profile = profiles.get(d["user_id"])
            out.append(StoryPublic(
                id=d["_id"],
                user_id=d["user_id"],
                user=to_public(profile) if profile else None,
                text=d["text"],
                created_at=as_utc(d["created_at"]),
                expires_at=as_utc(d["expires_at"]),
            ))
        return out


async def sweep_expired_stories(service: StoryService, interval_seconds: float) -> None:
    """Runs until cancelled; a failed sweep is logged and retried next round."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await service.clean_expired()
        except Exception:
            logger.exception("Story sweep failed")
