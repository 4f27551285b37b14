from typing import Any, Dict, List

from socialnet.repositories.comment_repository import CommentRepository
from socialnet.repositories.post_repository import PostRepository
from socialnet.repositories.user_repository import UserRepository
from socialnet.schemas.comment import CommentPublic
from socialnet.utils.dates import as_utc
from socialnet.utils.errors import CommentNotFound, PermissionDenied, PostNotFound, ValidationError


def comment_out(doc: Dict[str, Any]) -> CommentPublic:
    creator = doc.get("creator", {})
    return CommentPublic(
        id=doc["_id"],
        post_id=doc["post_id"],
        creator_id=creator.get("creator_id"),
        creator_name=creator.get("creator_name"),
        creator_photo=creator.get("creator_photo"),
        comment=doc["comment"],
        created_at=as_utc(doc["created_at"]),
    )


class CommentService:

    def __init__(self, comment_repo: CommentRepository, post_repo: PostRepository, user_repo: UserRepository) -> None:
        self._comment_repo = comment_repo
        self._post_repo = post_repo
        self._user_repo = user_repo

    async def create_comment(self, user_id: str, post_id: str, text: str) -> CommentPublic:
        """The author's name and photo are copied onto the comment as they are now."""
        if not text or not text.strip():
            raise ValidationError("Please write a comment")
        if not await self._post_repo.get_post(post_id):
            raise PostNotFound()
        author = await self._user_repo.get_user_by_id(user_id) or {}
        creator = {
            "creator_id": user_id,
            "creator_name": author.get("full_name"),
            "creator_photo": author.get("profile_photo"),
        }
        doc = await self._comment_repo.create_comment(post_id, creator, text)
        await self._post_repo.change_comment_count(post_id, 1)
        return comment_out(doc)

    async def list_comments(self, post_id: str) -> List[CommentPublic]:
        if not await self._post_repo.get_post(post_id):
            raise PostNotFound()
        return [comment_out(c) for c in await self._comment_repo.list_for_post(post_id)]

    async def delete_comment(self, user_id: str, comment_id: str) -> CommentPublic:
        comment = await self._comment_repo.get_comment(comment_id)
        if not comment:
            raise CommentNotFound()
        if comment.get("creator", {}).get("creator_id") != user_id:
            raise PermissionDenied("Unauthorized actions.")
        await self._comment_repo.delete_comment(comment_id)
        await self._post_repo.change_comment_count(comment["post_id"], -1)
        return comment_out(comment)
