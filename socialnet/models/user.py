from datetime import datetime
from typing import List, Optional, TypedDict


class UserDocument(TypedDict, total=False):

    _id: str
    full_name: str
    email: str
    hashed_password: str
    profile_photo: Optional[str]
    bio: Optional[str]
    followers: List[str]
    following: List[str]
    # post ids
    bookmarks: List[str]
    created_at: datetime
