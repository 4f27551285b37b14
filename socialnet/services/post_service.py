from typing import Any, Dict, List, Optional

from socialnet.repositories.comment_repository import CommentRepository
from socialnet.repositories.post_repository import PostRepository
from socialnet.repositories.user_repository import UserRepository
from socialnet.schemas.post import BookmarkResult, LikeResult, PostDetail, PostPublic
from socialnet.services.comment_service import comment_out
from socialnet.utils.dates import as_utc
from socialnet.utils.errors import PermissionDenied, PostNotFound, UserNotFound, ValidationError


def post_out(doc: Dict[str, Any]) -> PostPublic:
    return PostPublic(
        id=doc["_id"],
        creator_id=doc["creator_id"],
        body=doc["body"],
        image=doc.get("image"),
        likes=doc.get("likes", []),
        comment_count=doc.get("comment_count", 0),
        created_at=as_utc(doc["created_at"]),
        updated_at=as_utc(doc["updated_at"]),
    )


class PostService:
    """
    Posts, likes and bookmarks.

    Only the creator may edit or delete a post. Deleting a post also removes
    its comments and drops it from every user's bookmarks.
    """

    def __init__(self, post_repo: PostRepository, comment_repo: CommentRepository, user_repo: UserRepository) -> None:
        self._post_repo = post_repo
        self._comment_repo = comment_repo
        self._user_repo = user_repo

    async def create_post(self, creator_id: str, body: str, image: Optional[str] = None) -> PostPublic:
        if not body or not body.strip():
            raise ValidationError("Fill in text field")
        doc = await self._post_repo.create_post(creator_id, body, image)
        return post_out(doc)

    async def get_post(self, post_id: str) -> PostDetail:
        doc = await self._require_post(post_id)
        comments = await self._comment_repo.list_for_post(post_id)
        return PostDetail(post=post_out(doc), comments=[comment_out(c) for c in comments])

    async def list_posts(self) -> List[PostPublic]:
        return [post_out(d) for d in await self._post_repo.list_posts()]

    async def list_user_posts(self, user_id: str) -> List[PostPublic]:
        if not await self._user_repo.get_user_by_id(user_id):
            raise UserNotFound()
        return [post_out(d) for d in await self._post_repo.list_posts(creator_ids=[user_id])]

    async def list_following_posts(self, user_id: str) -> List[PostPublic]:
        user = await self._user_repo.get_user_by_id(user_id)
        following = user.get("following", []) if user else []
        if not following:
            return []
        return [post_out(d) for d in await self._post_repo.list_posts(creator_ids=following)]

    async def update_post(self, user_id: str, post_id: str, body: str) -> PostPublic:
        post = await self._require_post(post_id)
        if post["creator_id"] != user_id:
            raise PermissionDenied("You can't update this post since you are not the creator")
        if not body or not body.strip():
            raise ValidationError("Fill in text field")
        updated = await self._post_repo.update_body(post_id, body)
        return post_out(updated)

    async def delete_post(self, user_id: str, post_id: str) -> PostPublic:
        post = await self._require_post(post_id)
        if post["creator_id"] != user_id:
            raise PermissionDenied("You can't delete this post since you are not the creator")
        await self._post_repo.delete_post(post_id)
        await self._comment_repo.delete_for_post(post_id)
        await self._user_repo.remove_bookmark_everywhere(post_id)
        return post_out(post)

    async def toggle_like(self, user_id: str, post_id: str) -> LikeResult:
        post = await self._require_post(post_id)
        if user_id in post.get("likes", []):
            updated = await self._post_repo.remove_like(post_id, user_id)
            liked = False
        else:
            updated = await self._post_repo.add_like(post_id, user_id)
            liked = True
        return LikeResult(liked=liked, likes=updated.get("likes", []) if updated else [])

    async def toggle_bookmark(self, user_id: str, post_id: str) -> BookmarkResult:
        await self._require_post(post_id)
        user = await self._user_repo.get_user_by_id(user_id)
        if user and post_id in user.get("bookmarks", []):
            await self._user_repo.remove_bookmark(user_id, post_id)
            bookmarked = False
        else:
            await self._user_repo.add_bookmark(user_id, post_id)
            bookmarked = True
        user = await self._user_repo.get_user_by_id(user_id)
        return BookmarkResult(bookmarked=bookmarked, bookmarks=user.get("bookmarks", []) if user else [])

    async def list_bookmarks(self, user_id: str) -> List[PostPublic]:
        user = await self._user_repo.get_user_by_id(user_id)
        bookmarks = user.get("bookmarks", []) if user else []
        if not bookmarks:
            return []
        return [post_out(d) for d in await self._post_repo.list_posts(post_ids=bookmarks)]

    async def _require_post(self, post_id: str) -> Dict[str, Any]:
        post = await self._post_repo.get_post(post_id)
        if not post:
            raise PostNotFound()
        return post
