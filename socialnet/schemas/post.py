from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from socialnet.schemas.comment import CommentPublic


class PostCreate(BaseModel):

    body: str
    # a link to an already hosted image
    image: Optional[str] = None


class PostUpdate(BaseModel):

    body: str


class PostPublic(BaseModel):

    id: str
    creator_id: str
    body: str
    image: Optional[str] = None
    likes: List[str] = []
    comment_count: int = 0
    created_at: datetime
    updated_at: datetime


class PostDetail(BaseModel):

    post: PostPublic
    comments: List[CommentPublic]


class LikeResult(BaseModel):

    liked: bool
    likes: List[str]


class BookmarkResult(BaseModel):

    bookmarked: bool
    bookmarks: List[str]
