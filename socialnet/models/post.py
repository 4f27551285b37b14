from datetime import datetime
from typing import List, Optional, TypedDict


class PostDocument(TypedDict, total=False):
    _id: str
    creator_id: str
    body: str
    # link to already hosted media; uploads are not handled here
    image: Optional[str]
    likes: List[str]
    comment_count: int
    created_at: datetime
    updated_at: datetime
