from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from socialnet.schemas.user import UserPublic


class StoryCreate(BaseModel):

    text: str


class StoryPublic(BaseModel):

    id: str
    user_id: str
    user: Optional[UserPublic] = None
    text: str
    created_at: datetime
    expires_at: datetime
