from datetime import datetime
from typing import TypedDict


class StoryDocument(TypedDict, total=False):
    _id: str
    user_id: str
    text: str
    expires_at: datetime
    created_at: datetime
