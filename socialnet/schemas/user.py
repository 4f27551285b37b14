from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):

    email: EmailStr


class UserCreate(UserBase):

    full_name: str = Field(min_length=1)
    password: str
    confirm_password: str


class UserLogin(UserBase):

    password: str


class UserPublic(BaseModel):

    id: str
    full_name: Optional[str] = None
    profile_photo: Optional[str] = None
    bio: Optional[str] = None
    followers: List[str] = []
    following: List[str] = []


class ProfileUpdate(BaseModel):

    full_name: Optional[str] = Field(default=None, min_length=1)
    bio: Optional[str] = None
    # a link to an already hosted image
    profile_photo: Optional[str] = None


class FollowResult(BaseModel):

    followed: bool
    following: List[str]


class Token(BaseModel):

    access_token: str
    token_type: str = "bearer"
    id: str
    profile_photo: Optional[str] = None
