from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class CommentCreate(BaseModel):

    comment: str


class CommentPublic(BaseModel):

    id: str
    post_id: str
    creator_id: str
    creator_name: Optional[str] = None
    creator_photo: Optional[str] = None
    comment: str
    created_at: datetime
