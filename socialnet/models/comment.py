from datetime import datetime
from typing import Optional, TypedDict


class CommentCreator(TypedDict):
    creator_id: str
    creator_name: Optional[str]
    creator_photo: Optional[str]


class CommentDocument(TypedDict, total=False):
    _id: str
    post_id: str
    # snapshot of the author at the time of writing
    creator: CommentCreator
    comment: str
    created_at: datetime
